"""Exceptions raised by the playlist core and its adapters."""


class PlaylistError(Exception):
    """Base class for playlist errors."""


class InvalidPosition(PlaylistError, IndexError):
    """Insertion position outside [0, count]."""

    def __init__(self, position: int, count: int):
        super().__init__(f"Invalid position {position}: expected 0..{count}")
        self.position = position
        self.count = count


class TrackNotFound(PlaylistError, LookupError):
    """No track with the given id."""

    def __init__(self, track_id):
        super().__init__(f"Track not found: {track_id!r}")
        self.track_id = track_id


class MediaError(Exception):
    """A media file could not be read."""
