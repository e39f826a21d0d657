"""Import MIDI files as playlist tracks: metadata probe, duration label, id allocation."""

import logging
import math
import os
from typing import NamedTuple

import mido

from midi_jukebox.album_art import placeholder_ref
from midi_jukebox.errors import MediaError

log = logging.getLogger(__name__)

MIDI_EXTENSIONS = ('.mid', '.midi')


class MediaInfo(NamedTuple):
    title: str
    duration_seconds: float


def format_time(seconds: float) -> str:
    """Format seconds as m:ss (floored)."""
    if seconds is None or math.isnan(seconds) or seconds < 0:
        return '0:00'
    mins = int(seconds // 60)
    secs = int(seconds % 60)
    return f'{mins}:{secs:02d}'


def is_midi_file(path: str) -> bool:
    return path.lower().endswith(MIDI_EXTENSIONS)


def _track_name(mid: mido.MidiFile) -> str | None:
    for track in mid.tracks:
        for msg in track:
            if msg.is_meta and msg.type == 'track_name':
                name = (msg.name or '').strip()
                if name:
                    return name
    return None


def probe_midi(path: str) -> MediaInfo:
    """Read title and length from a MIDI file. Title falls back to the file name."""
    try:
        mid = mido.MidiFile(path)
        length = mid.length
    except (OSError, EOFError, ValueError, KeyError, TypeError) as e:
        raise MediaError(f'Cannot read MIDI file {path}: {e}') from e
    stem = os.path.splitext(os.path.basename(path))[0]
    return MediaInfo(_track_name(mid) or stem, float(length))


def next_track_id(playlist) -> int:
    """One more than the largest integer id in the playlist (1 when empty)."""
    ids = [t.id for t in playlist.snapshot() if isinstance(t.id, int)]
    return max(ids, default=0) + 1


def track_fields_from_file(
    path: str,
    title: str | None = None,
    artist: str | None = None,
    album_art: str | None = None,
    seed=None,
) -> dict[str, str]:
    """Keyword fields for Playlist.append/insert_at built from a MIDI file.

    Explicit title/artist win over the file's metadata. Without album art a
    placeholder ref is generated from `seed` (or the path).
    """
    if not is_midi_file(path):
        raise MediaError(f'Not a MIDI file: {path}')
    info = probe_midi(path)
    log.debug('Probed %s: %r, %.1fs', path, info.title, info.duration_seconds)
    return {
        'title': (title or '').strip() or info.title,
        'artist': (artist or '').strip() or 'Unknown artist',
        'album_art_ref': album_art or placeholder_ref(seed if seed is not None else path),
        'duration_label': format_time(info.duration_seconds),
        'media_ref': os.path.abspath(path),
    }
