"""Playlist state: doubly linked sequence of tracks with a circular cursor (no UI).

Nodes live in an arena (a list of slots) and refer to each other by integer
handle, never by object reference. Removal returns the slot to a free list.
"""

import logging
import threading
from typing import Hashable, Iterator

from midi_jukebox.errors import InvalidPosition, TrackNotFound
from midi_jukebox.track import Track

log = logging.getLogger(__name__)


class _Node:
    __slots__ = ("track", "prev", "next")

    def __init__(self, track: Track) -> None:
        self.track = track
        self.prev: int | None = None
        self.next: int | None = None


class Playlist:
    """Ordered, mutable collection of tracks with a "now playing" cursor.

    Every public operation holds the instance lock for its whole duration, so
    no caller can observe a half-relinked sequence.
    """

    def __init__(self) -> None:
        self._slots: list[_Node | None] = []
        self._free: list[int] = []
        self._head: int | None = None
        self._tail: int | None = None
        self._cursor: int | None = None
        self._count = 0
        self._lock = threading.RLock()

    # ---- arena ----

    def _alloc(self, track: Track) -> int:
        node = _Node(track)
        if self._free:
            handle = self._free.pop()
            self._slots[handle] = node
        else:
            handle = len(self._slots)
            self._slots.append(node)
        return handle

    def _release(self, handle: int) -> None:
        self._slots[handle] = None
        self._free.append(handle)

    def _node(self, handle: int) -> _Node:
        return self._slots[handle]

    def _handles(self) -> Iterator[int]:
        handle = self._head
        while handle is not None:
            yield handle
            handle = self._node(handle).next

    def _find(self, track_id: Hashable) -> int | None:
        for handle in self._handles():
            if self._node(handle).track.id == track_id:
                return handle
        return None

    # ---- insertion ----

    def _link_last(self, handle: int) -> None:
        if self._tail is None:
            self._head = self._tail = handle
            self._cursor = handle
        else:
            self._node(self._tail).next = handle
            self._node(handle).prev = self._tail
            self._tail = handle
        self._count += 1

    def append(
        self,
        track_id: Hashable,
        title: str,
        artist: str = "",
        album_art_ref: str = "",
        duration_label: str = "",
        media_ref: str = "",
    ) -> Track:
        """Add a track after the last one. The first track also becomes the cursor."""
        track = Track(track_id, title, artist, album_art_ref, duration_label, media_ref)
        with self._lock:
            self._link_last(self._alloc(track))
            log.debug("Appended track %r (count=%d)", track_id, self._count)
        return track

    def insert_at(
        self,
        position: int,
        track_id: Hashable,
        title: str,
        artist: str = "",
        album_art_ref: str = "",
        duration_label: str = "",
        media_ref: str = "",
    ) -> Track:
        """Insert a track so it ends up at index `position` (0..count inclusive).

        Raises InvalidPosition for anything outside that range; nothing changes then.
        """
        with self._lock:
            if position < 0 or position > self._count:
                raise InvalidPosition(position, self._count)
            if position == self._count:
                return self.append(
                    track_id, title, artist, album_art_ref, duration_label, media_ref
                )
            track = Track(track_id, title, artist, album_art_ref, duration_label, media_ref)
            handle = self._alloc(track)
            node = self._node(handle)
            if position == 0:
                # count > 0 here, so head exists
                node.next = self._head
                self._node(self._head).prev = handle
                self._head = handle
            else:
                before = self._head
                for _ in range(position - 1):
                    before = self._node(before).next
                after = self._node(before).next
                node.prev = before
                node.next = after
                self._node(before).next = handle
                self._node(after).prev = handle
            self._count += 1
            log.debug("Inserted track %r at %d (count=%d)", track_id, position, self._count)
            return track

    # ---- lookup ----

    def search_by_id(self, track_id: Hashable) -> Track | None:
        """First track whose id equals track_id, or None."""
        with self._lock:
            handle = self._find(track_id)
            return None if handle is None else self._node(handle).track

    def get(self, track_id: Hashable) -> Track:
        """Like search_by_id but raises TrackNotFound when absent."""
        track = self.search_by_id(track_id)
        if track is None:
            raise TrackNotFound(track_id)
        return track

    def snapshot(self) -> tuple[Track, ...]:
        """All tracks in order. Tracks are frozen, so the view cannot corrupt the list."""
        with self._lock:
            return tuple(self._node(h).track for h in self._handles())

    # ---- cursor ----

    def current_track(self) -> Track | None:
        with self._lock:
            return None if self._cursor is None else self._node(self._cursor).track

    def current_index(self) -> int | None:
        with self._lock:
            if self._cursor is None:
                return None
            for i, handle in enumerate(self._handles()):
                if handle == self._cursor:
                    return i
            return None

    def advance(self) -> Track | None:
        """Move the cursor forward, wrapping from the last track to the first."""
        with self._lock:
            if self._cursor is None:
                return None
            nxt = self._node(self._cursor).next
            self._cursor = self._head if nxt is None else nxt
            return self._node(self._cursor).track

    def retreat(self) -> Track | None:
        """Move the cursor backward, wrapping from the first track to the last."""
        with self._lock:
            if self._cursor is None:
                return None
            prev = self._node(self._cursor).prev
            self._cursor = self._tail if prev is None else prev
            return self._node(self._cursor).track

    def set_cursor_by_id(self, track_id: Hashable) -> Track | None:
        """Point the cursor at track_id. Returns None (cursor unchanged) if absent."""
        with self._lock:
            handle = self._find(track_id)
            if handle is None:
                return None
            self._cursor = handle
            return self._node(handle).track

    # ---- removal ----

    def remove_by_id(self, track_id: Hashable) -> bool:
        """Unlink the first track with this id. Returns False if there is none.

        If it was the cursor, the cursor moves to the following track, or to the
        new last track when the tail was removed, or is cleared when nothing is left.
        """
        with self._lock:
            handle = self._find(track_id)
            if handle is None:
                return False
            node = self._node(handle)
            prev, nxt = node.prev, node.next
            if prev is None and nxt is None:
                self._head = self._tail = None
                successor = None
            elif prev is None:
                self._head = nxt
                self._node(nxt).prev = None
                successor = nxt
            elif nxt is None:
                self._tail = prev
                self._node(prev).next = None
                successor = prev
            else:
                self._node(prev).next = nxt
                self._node(nxt).prev = prev
                successor = nxt
            if self._cursor == handle:
                self._cursor = successor
            self._release(handle)
            self._count -= 1
            log.debug("Removed track %r (count=%d)", track_id, self._count)
            return True

    def clear(self) -> None:
        with self._lock:
            self._slots.clear()
            self._free.clear()
            self._head = self._tail = self._cursor = None
            self._count = 0

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[Track]:
        return iter(self.snapshot())
