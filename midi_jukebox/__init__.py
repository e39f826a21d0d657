"""MIDI jukebox: doubly linked playlist with a circular cursor, MIDI playback, Tk GUI."""

from midi_jukebox.errors import (
    InvalidPosition,
    MediaError,
    PlaylistError,
    TrackNotFound,
)
from midi_jukebox.playlist import Playlist
from midi_jukebox.track import Track

__all__ = [
    'InvalidPosition',
    'MediaError',
    'Playlist',
    'PlaylistError',
    'Track',
    'TrackNotFound',
]
