"""Player controller: drives MIDI playback from the playlist cursor.

The controller is the only code that moves the cursor for the GUI. After every
cursor change it loads the cursor's track and, if it was playing, keeps
playing. Playback runs on a worker started through `spawn`; everything the
worker reports comes back through `dispatch` (the GUI passes a root.after
wrapper so callbacks run on the Tk thread).
"""

import logging
import threading
from typing import Callable, Hashable

import mido

from midi_jukebox import playback
from midi_jukebox.config import DEFAULT_VOLUME
from midi_jukebox.errors import MediaError, TrackNotFound
from midi_jukebox.library import next_track_id, probe_midi, track_fields_from_file
from midi_jukebox.playlist import Playlist
from midi_jukebox.track import Track

log = logging.getLogger(__name__)


def _spawn_thread(job: Callable[[], None]) -> None:
    threading.Thread(target=job, daemon=True).start()


class PlayerController:
    """Playback adapter over a Playlist. Listener attributes are optional callables."""

    def __init__(
        self,
        playlist: Playlist,
        open_output: Callable[[], object] | None = None,
        dispatch: Callable[[Callable[[], None]], None] | None = None,
        spawn: Callable[[Callable[[], None]], None] | None = None,
        volume: int = DEFAULT_VOLUME,
        port_name: str | None = None,
    ):
        self.playlist = playlist
        self._open_output = open_output or (lambda: mido.open_output(port_name))
        self._dispatch = dispatch or (lambda fn: fn())
        self._spawn = spawn or _spawn_thread
        self._port = None
        self._loaded: Track | None = None
        self._playing = False
        # Bumped on every load/seek/pause so stale workers stop and their reports are dropped
        self._generation = 0
        # Held by workers around each send and by _halt while retiring a worker
        self._send_lock = threading.Lock()
        self._worker_active = False
        self._position = 0.0
        self._duration: float | None = None
        self._volume = max(0, min(100, volume))

        # UI hooks only: navigation ignores them
        self.shuffle = False
        self.repeat = False

        self.on_track_loaded: Callable[[Track | None], None] | None = None
        self.on_state_changed: Callable[[bool], None] | None = None
        self.on_progress: Callable[[float, float], None] | None = None
        self.on_error: Callable[[str], None] | None = None

    # ---- state ----

    @property
    def loaded_track(self) -> Track | None:
        return self._loaded

    @property
    def position(self) -> float:
        return self._position

    @property
    def volume(self) -> int:
        return self._volume

    def is_playing(self) -> bool:
        return self._playing

    def _emit(self, name: str, *args) -> None:
        callback = getattr(self, name)
        if callback:
            callback(*args)

    def _set_playing(self, playing: bool) -> None:
        if self._playing != playing:
            self._playing = playing
            self._emit('on_state_changed', playing)

    def _halt(self) -> None:
        """Retire the running worker, if any, and silence the notes it left sounding."""
        with self._send_lock:
            self._generation += 1
            if self._worker_active and self._port is not None:
                playback.silence(self._port)
            self._worker_active = False

    def _load(self, track: Track | None) -> None:
        self._halt()
        self._loaded = track
        self._position = 0.0
        self._duration = None
        if track is None:
            self._set_playing(False)
        else:
            log.info('Loaded track %r: %s', track.id, track.title)
        self._emit('on_track_loaded', track)

    def load_current(self) -> Track | None:
        """Load the playlist's current track (stops any running worker)."""
        self._load(self.playlist.current_track())
        return self._loaded

    def _sync_with_cursor(self) -> None:
        """Reload if the cursor no longer points at the loaded track."""
        current = self.playlist.current_track()
        if current is self._loaded:
            return
        was_playing = self._playing
        self._load(current)
        if was_playing and current is not None:
            self._start_worker()

    # ---- transport ----

    def _ensure_port(self):
        if self._port is None:
            self._port = self._open_output()
        return self._port

    def _start_worker(self) -> None:
        track = self._loaded
        self._halt()
        gen = self._generation
        self._worker_active = True
        port = self._port
        start_at = self._position

        def is_playing() -> bool:
            return self._playing and self._generation == gen

        def progress(elapsed: float, total: float) -> None:
            self._dispatch(lambda: self._handle_progress(gen, elapsed, total))

        def done(finished: bool) -> None:
            self._dispatch(lambda: self._handle_done(gen, finished))

        def job() -> None:
            try:
                playback.run_playback_from_file(
                    track.media_ref, port, is_playing,
                    start_at=start_at, volume=lambda: self._volume,
                    progress_callback=progress, done_callback=done,
                    send_lock=self._send_lock, silence_on_stop=False,
                )
            except Exception as e:
                log.exception('Playback error for %s', track.media_ref)
                message = str(e)
                self._dispatch(lambda: self._handle_error(gen, message))

        self._spawn(job)

    def play(self) -> bool:
        """Start or resume the loaded track. Returns False if there is nothing to play."""
        if self._loaded is None:
            self.load_current()
        if self._loaded is None:
            return False
        if self._playing:
            return True
        try:
            self._ensure_port()
        except Exception as e:
            log.exception('Cannot open MIDI output')
            self._emit('on_error', f'Cannot open MIDI output: {e}')
            return False
        self._set_playing(True)
        self._start_worker()
        return True

    def pause(self) -> None:
        """Stop the worker but keep the position for resuming."""
        if self._playing:
            self._halt()
            self._set_playing(False)

    def toggle_play(self) -> bool:
        if self._playing:
            self.pause()
        else:
            self.play()
        return self._playing

    def stop(self) -> None:
        self.pause()
        self._position = 0.0
        self._emit('on_progress', 0.0, self._duration or 0.0)

    def next(self) -> Track | None:
        was_playing = self._playing
        self._load(self.playlist.advance())
        if was_playing and self._loaded is not None:
            self._start_worker()
        return self._loaded

    def previous(self) -> Track | None:
        was_playing = self._playing
        self._load(self.playlist.retreat())
        if was_playing and self._loaded is not None:
            self._start_worker()
        return self._loaded

    def play_by_id(self, track_id: Hashable) -> Track:
        """Select a track and play it from the start."""
        track = self.playlist.set_cursor_by_id(track_id)
        if track is None:
            raise TrackNotFound(track_id)
        self._load(track)
        if self._playing:
            self._start_worker()
        else:
            self.play()
        return track

    def track_length(self) -> float:
        """Length of the loaded track in seconds (0 when unknown)."""
        if self._loaded is None:
            return 0.0
        if self._duration is None:
            try:
                self._duration = probe_midi(self._loaded.media_ref).duration_seconds
            except MediaError:
                log.warning('Cannot read length of %s', self._loaded.media_ref)
                self._duration = 0.0
        return self._duration

    def seek(self, percent: float) -> float:
        """Jump to percent (0-100) of the loaded track. Returns the new position."""
        if self._loaded is None:
            return 0.0
        percent = max(0.0, min(100.0, percent))
        total = self.track_length()
        self._position = total * percent / 100.0
        if self._playing:
            self._start_worker()
        self._emit('on_progress', self._position, total)
        return self._position

    def set_volume(self, value: int) -> int:
        self._volume = max(0, min(100, int(value)))
        return self._volume

    def close(self) -> None:
        self.stop()
        if self._port is not None:
            self._port.close()
            self._port = None

    # ---- worker reports (run via dispatch) ----

    def _handle_progress(self, gen: int, elapsed: float, total: float) -> None:
        if gen != self._generation:
            return
        self._position = elapsed
        self._duration = total
        self._emit('on_progress', elapsed, total)

    def _handle_done(self, gen: int, finished: bool) -> None:
        if gen != self._generation:
            return
        self._worker_active = False
        if not finished:
            return
        self.on_track_finished()

    def _handle_error(self, gen: int, message: str) -> None:
        if gen != self._generation:
            return
        self._worker_active = False
        self._set_playing(False)
        self._emit('on_error', message)

    def on_track_finished(self) -> None:
        """Playback reached the end: move forward (circular) and keep playing."""
        log.debug('Track finished; advancing')
        self.next()

    # ---- playlist edits ----

    def add_track(self, title: str, track_id: Hashable = None, **fields) -> Track:
        if track_id is None:
            track_id = next_track_id(self.playlist)
        track = self.playlist.append(track_id, title, **fields)
        self._sync_with_cursor()
        return track

    def insert_track(self, position: int, title: str, track_id: Hashable = None, **fields) -> Track:
        """Insert at position; InvalidPosition propagates and nothing changes."""
        if track_id is None:
            track_id = next_track_id(self.playlist)
        track = self.playlist.insert_at(position, track_id, title, **fields)
        self._sync_with_cursor()
        return track

    def add_file(
        self,
        path: str,
        title: str | None = None,
        artist: str | None = None,
        album_art: str | None = None,
        position: int | None = None,
    ) -> Track:
        """Import a MIDI file (MediaError if unreadable) and append or insert it."""
        track_id = next_track_id(self.playlist)
        fields = track_fields_from_file(path, title, artist, album_art, seed=track_id)
        fields['track_id'] = track_id
        if position is None:
            track = self.add_track(**fields)
        else:
            track = self.insert_track(position, **fields)
        log.info('Imported %s as track %r', path, track.id)
        return track

    def remove_track(self, track_id: Hashable) -> bool:
        if not self.playlist.remove_by_id(track_id):
            return False
        self._sync_with_cursor()
        return True

    def clear_playlist(self) -> None:
        """Drop every track; playback stops and nothing stays loaded."""
        self.playlist.clear()
        log.info('Playlist cleared')
        self._sync_with_cursor()
