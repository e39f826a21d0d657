"""Play MIDI files to a mido output port, in real time, on the calling thread."""

import contextlib
import logging
import time
from typing import Callable

import mido

log = logging.getLogger(__name__)

# Longest single sleep, so a stop request is noticed quickly
POLL_INTERVAL_SEC = 0.05
# Minimum gap between progress callbacks
PROGRESS_INTERVAL_SEC = 0.25

ALL_NOTES_OFF = 123

Event = tuple[float, mido.Message]


def load_events(path: str) -> list[Event]:
    """Parse a MIDI file into (time_seconds, message) with meta messages dropped."""
    mid = mido.MidiFile(path)
    events: list[Event] = []
    now = 0.0
    # Iterating a MidiFile yields delta times already converted to seconds
    for msg in mid:
        now += msg.time
        if msg.is_meta:
            continue
        events.append((now, msg))
    return events


def scale_velocity(msg: mido.Message, volume: int) -> mido.Message:
    """Apply a 0-100 volume to note_on velocity; other messages pass through."""
    if msg.type != 'note_on' or msg.velocity == 0:
        return msg
    velocity = int(round(msg.velocity * max(0, min(100, volume)) / 100))
    # velocity 0 would mean note_off
    return msg.copy(velocity=max(1, velocity))


def silence(port) -> None:
    """Send All Notes Off on every channel."""
    for channel in range(16):
        port.send(mido.Message('control_change', channel=channel, control=ALL_NOTES_OFF, value=0))


def run_playback(
    events: list[Event],
    port,
    is_playing: Callable[[], bool],
    start_at: float = 0.0,
    volume: Callable[[], int] = lambda: 100,
    progress_callback: Callable[[float, float], None] | None = None,
    send_lock=None,
    silence_on_stop: bool = True,
) -> bool:
    """Send events to port at their times. Returns True if the end was reached.

    Events before start_at are sent at once, except notes, so program and
    controller state is right when playback resumes mid-song.

    Each send happens under send_lock together with an is_playing() check, so a
    caller that stops playback while holding the same lock gets no further
    messages from this loop. With silence_on_stop=False the caller owns the
    All Notes Off.
    """
    lock = send_lock if send_lock is not None else contextlib.nullcontext()
    total = events[-1][0] if events else 0.0
    t0 = time.perf_counter() - start_at
    last_progress = -PROGRESS_INTERVAL_SEC

    def stopped() -> bool:
        if silence_on_stop:
            silence(port)
        return False

    for when, msg in events:
        if when < start_at:
            if msg.type not in ('note_on', 'note_off'):
                with lock:
                    if not is_playing():
                        return stopped()
                    port.send(msg)
            continue
        # Wait until this event's time
        while True:
            wait = when - (time.perf_counter() - t0)
            if wait <= 0:
                break
            time.sleep(min(wait, POLL_INTERVAL_SEC))
            if not is_playing():
                return stopped()
        with lock:
            if not is_playing():
                return stopped()
            port.send(scale_velocity(msg, volume()))
        if progress_callback and when - last_progress >= PROGRESS_INTERVAL_SEC:
            last_progress = when
            progress_callback(when, total)
    if progress_callback:
        progress_callback(total, total)
    return True


def run_playback_from_file(
    path: str,
    port,
    is_playing: Callable[[], bool],
    start_at: float = 0.0,
    volume: Callable[[], int] = lambda: 100,
    progress_callback: Callable[[float, float], None] | None = None,
    done_callback: Callable[[bool], None] | None = None,
    send_lock=None,
    silence_on_stop: bool = True,
) -> None:
    """
    Parse MIDI file and run playback in the current thread.
    done_callback(finished_naturally) is always called, also when parsing or sending fails.
    """
    finished_naturally = False
    try:
        events = load_events(path)
        log.info('Playing %s from %.1fs (%d events)', path, start_at, len(events))
        finished_naturally = run_playback(
            events, port, is_playing,
            start_at=start_at, volume=volume, progress_callback=progress_callback,
            send_lock=send_lock, silence_on_stop=silence_on_stop,
        )
    finally:
        if done_callback:
            done_callback(finished_naturally)
