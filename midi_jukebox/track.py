"""Track record: identity plus display/media metadata (no UI)."""

from dataclasses import dataclass
from typing import Hashable


@dataclass(frozen=True)
class Track:
    """A single playable entry. Never mutated after creation."""

    id: Hashable
    title: str
    artist: str = ""
    album_art_ref: str = ""
    duration_label: str = ""
    # Opaque handle to playable content (a file path for MIDI files)
    media_ref: str = ""

    def display_line(self, width: int = 50) -> str:
        title = self.title[:width] + "…" if len(self.title) > width else self.title
        if self.artist:
            return f"{title} — {self.artist}"
        return title
