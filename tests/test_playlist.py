"""Tests for midi_jukebox.playlist: insertion, lookup, circular cursor, removal."""

import pytest

from midi_jukebox.errors import InvalidPosition, TrackNotFound
from midi_jukebox.playlist import Playlist
from midi_jukebox.track import Track


def make_playlist(*ids):
    pl = Playlist()
    for i in ids:
        pl.append(i, f'Song {i}', artist='Artist', media_ref=f'/music/{i}.mid')
    return pl


def ids(pl):
    return [t.id for t in pl.snapshot()]


def assert_links_consistent(pl):
    """Walk the arena both ways and compare with the snapshot and count."""
    forward = []
    handle = pl._head
    prev = None
    while handle is not None:
        node = pl._slots[handle]
        assert node.prev == prev
        forward.append(node.track.id)
        prev, handle = handle, node.next
    assert pl._tail == prev
    backward = []
    handle = pl._tail
    while handle is not None:
        backward.append(pl._slots[handle].track.id)
        handle = pl._slots[handle].prev
    assert forward == ids(pl)
    assert backward == list(reversed(forward))
    assert len(pl) == len(forward)


class TestAppend:
    """Test append order, count and first cursor."""

    def test_empty_playlist(self):
        pl = Playlist()
        assert len(pl) == 0
        assert pl.snapshot() == ()
        assert pl.current_track() is None

    def test_order_and_count_follow_calls(self):
        pl = make_playlist(1, 2, 3, 4, 5)
        assert ids(pl) == [1, 2, 3, 4, 5]
        assert len(pl) == 5
        assert_links_consistent(pl)

    def test_returns_track_with_fields(self):
        pl = Playlist()
        track = pl.append('a', 'Title', 'Artist', 'art.png', '3:25', '/x.mid')
        assert track == Track('a', 'Title', 'Artist', 'art.png', '3:25', '/x.mid')

    def test_first_append_sets_cursor(self):
        pl = Playlist()
        first = pl.append(1, 'One')
        pl.append(2, 'Two')
        assert pl.current_track() is first


class TestInsertAt:
    """Test positional insertion and InvalidPosition."""

    def test_position_zero_becomes_first(self):
        pl = make_playlist(1, 2)
        pl.insert_at(0, 9, 'Nine')
        assert ids(pl) == [9, 1, 2]
        assert_links_consistent(pl)

    def test_position_zero_does_not_move_existing_cursor(self):
        pl = make_playlist(1, 2)
        pl.insert_at(0, 9, 'Nine')
        assert pl.current_track().id == 1

    def test_position_zero_on_empty_sets_cursor(self):
        pl = Playlist()
        track = pl.insert_at(0, 7, 'Seven')
        assert pl.current_track() is track
        assert ids(pl) == [7]
        assert_links_consistent(pl)

    def test_position_count_equals_append(self):
        a = make_playlist(1, 2)
        a.insert_at(2, 3, 'Song 3', artist='Artist', media_ref='/music/3.mid')
        b = make_playlist(1, 2, 3)
        assert a.snapshot() == b.snapshot()
        assert_links_consistent(a)

    def test_interior_position(self):
        pl = make_playlist(1, 2, 3, 4)
        pl.insert_at(2, 9, 'Nine')
        assert ids(pl) == [1, 2, 9, 3, 4]
        assert len(pl) == 5
        assert_links_consistent(pl)

    def test_position_one(self):
        pl = make_playlist(1, 2)
        pl.insert_at(1, 9, 'Nine')
        assert ids(pl) == [1, 9, 2]
        assert_links_consistent(pl)

    @pytest.mark.parametrize('position', [-1, 4, 100])
    def test_out_of_range_raises_and_leaves_playlist(self, position):
        pl = make_playlist(1, 2, 3)
        pl.advance()
        before = pl.snapshot()
        with pytest.raises(InvalidPosition) as exc:
            pl.insert_at(position, 9, 'Nine')
        assert exc.value.position == position
        assert exc.value.count == 3
        assert pl.snapshot() == before
        assert len(pl) == 3
        assert pl.current_track().id == 2

    def test_invalid_position_is_index_error(self):
        with pytest.raises(IndexError):
            Playlist().insert_at(1, 1, 'One')


class TestSearch:
    """Test search_by_id and get."""

    def test_found(self):
        pl = make_playlist(1, 2, 3)
        assert pl.search_by_id(2).title == 'Song 2'

    def test_not_found(self):
        pl = make_playlist(1, 2, 3)
        assert pl.search_by_id(42) is None

    def test_first_match_wins_for_duplicate_ids(self):
        pl = Playlist()
        pl.append(1, 'First')
        pl.append(1, 'Second')
        assert pl.search_by_id(1).title == 'First'

    def test_search_has_no_side_effects(self):
        pl = make_playlist(1, 2, 3)
        pl.search_by_id(3)
        assert pl.current_track().id == 1

    def test_get_raises_track_not_found(self):
        pl = make_playlist(1)
        with pytest.raises(TrackNotFound) as exc:
            pl.get(5)
        assert exc.value.track_id == 5
        assert pl.get(1).id == 1


class TestNavigation:
    """Test circular advance/retreat and cursor selection."""

    def test_advance_and_retreat_on_empty_are_noops(self):
        pl = Playlist()
        assert pl.advance() is None
        assert pl.retreat() is None
        assert pl.current_track() is None

    def test_advance_wraps_to_first(self):
        pl = make_playlist(1, 2, 3)
        assert [pl.advance().id for _ in range(4)] == [2, 3, 1, 2]

    def test_retreat_wraps_to_last(self):
        pl = make_playlist(1, 2, 3)
        assert [pl.retreat().id for _ in range(4)] == [3, 2, 1, 3]

    def test_single_track_advance_stays(self):
        pl = make_playlist(1)
        assert pl.advance().id == 1
        assert pl.retreat().id == 1

    @pytest.mark.parametrize('start', [1, 2, 3, 4])
    def test_advance_count_times_returns_to_start(self, start):
        pl = make_playlist(1, 2, 3, 4)
        pl.set_cursor_by_id(start)
        for _ in range(len(pl)):
            pl.advance()
        assert pl.current_track().id == start

    @pytest.mark.parametrize('start', [1, 2, 3])
    def test_retreat_inverts_advance(self, start):
        pl = make_playlist(1, 2, 3)
        pl.set_cursor_by_id(start)
        pl.advance()
        assert pl.retreat().id == start
        pl.retreat()
        assert pl.advance().id == start

    def test_set_cursor_by_id(self):
        pl = make_playlist(1, 2, 3)
        assert pl.set_cursor_by_id(3).id == 3
        assert pl.current_track().id == 3
        assert pl.current_index() == 2

    def test_set_cursor_missing_leaves_cursor(self):
        pl = make_playlist(1, 2, 3)
        pl.advance()
        assert pl.set_cursor_by_id(99) is None
        assert pl.current_track().id == 2

    def test_current_index_empty(self):
        assert Playlist().current_index() is None


class TestRemove:
    """Test unlinking in every position and cursor reassignment."""

    def test_absent_returns_false_and_changes_nothing(self):
        pl = make_playlist(1, 2, 3)
        before = pl.snapshot()
        assert pl.remove_by_id(99) is False
        assert pl.snapshot() == before
        assert len(pl) == 3

    def test_sole_element(self):
        pl = make_playlist(1)
        assert pl.remove_by_id(1) is True
        assert pl.snapshot() == ()
        assert pl.current_track() is None
        assert len(pl) == 0
        assert_links_consistent(pl)

    def test_head(self):
        pl = make_playlist(1, 2, 3)
        pl.set_cursor_by_id(3)
        assert pl.remove_by_id(1)
        assert ids(pl) == [2, 3]
        assert pl.current_track().id == 3
        assert_links_consistent(pl)

    def test_tail(self):
        pl = make_playlist(1, 2, 3)
        assert pl.remove_by_id(3)
        assert ids(pl) == [1, 2]
        assert pl.current_track().id == 1
        assert_links_consistent(pl)

    def test_interior(self):
        pl = make_playlist(1, 2, 3)
        assert pl.remove_by_id(2)
        assert ids(pl) == [1, 3]
        assert len(pl) == 2
        assert_links_consistent(pl)

    def test_removing_current_head_moves_to_successor(self):
        pl = make_playlist(1, 2, 3)
        pl.remove_by_id(1)
        assert pl.current_track().id == 2

    def test_removing_current_interior_moves_to_successor(self):
        pl = make_playlist(1, 2, 3)
        pl.set_cursor_by_id(2)
        pl.remove_by_id(2)
        assert pl.current_track().id == 3

    def test_removing_current_tail_moves_to_new_tail(self):
        pl = make_playlist(1, 2, 3)
        pl.set_cursor_by_id(3)
        pl.remove_by_id(3)
        assert pl.current_track().id == 2

    def test_removing_last_remaining_clears_cursor(self):
        pl = make_playlist(1, 2)
        pl.remove_by_id(1)
        assert pl.current_track().id == 2
        pl.remove_by_id(2)
        assert pl.current_track() is None
        assert pl.advance() is None

    def test_append_then_remove_round_trip(self):
        pl = Playlist()
        track = pl.append(5, 'Five')
        assert pl.remove_by_id(track.id)
        assert pl.snapshot() == ()
        assert pl.current_track() is None
        # reusable afterwards
        again = pl.append(6, 'Six')
        assert pl.current_track() is again
        assert_links_consistent(pl)

    def test_slots_are_reused(self):
        pl = make_playlist(1, 2, 3)
        pl.remove_by_id(2)
        pl.append(4, 'Four')
        assert len(pl._slots) == 3
        assert ids(pl) == [1, 3, 4]
        assert_links_consistent(pl)

    def test_clear(self):
        pl = make_playlist(1, 2)
        pl.clear()
        assert len(pl) == 0
        assert pl.current_track() is None
        pl.append(3, 'Three')
        assert ids(pl) == [3]


class TestSnapshot:
    """Test that the snapshot is a read-only copy."""

    def test_snapshot_is_tuple_copy(self):
        pl = make_playlist(1, 2)
        snap = pl.snapshot()
        assert isinstance(snap, tuple)
        pl.append(3, 'Three')
        assert [t.id for t in snap] == [1, 2]

    def test_tracks_are_frozen(self):
        pl = make_playlist(1)
        track = pl.snapshot()[0]
        with pytest.raises(AttributeError):
            track.title = 'changed'
        assert pl.current_track().title == 'Song 1'

    def test_iteration_matches_snapshot(self):
        pl = make_playlist(1, 2, 3)
        assert list(pl) == list(pl.snapshot())


class TestScenario:
    """Walk through append, wrap-around, removal and cursor reassignment."""

    def test_abc_scenario(self):
        pl = Playlist()
        a = pl.append('A', 'Alpha')
        b = pl.append('B', 'Bravo')
        c = pl.append('C', 'Charlie')
        assert pl.snapshot() == (a, b, c)
        assert pl.current_track() is a
        assert pl.advance() is b
        assert pl.advance() is c
        assert pl.advance() is a
        assert pl.remove_by_id(b.id)
        assert pl.snapshot() == (a, c)
        assert pl.current_track() is a
        assert pl.set_cursor_by_id(c.id) is c
        assert pl.remove_by_id(c.id)
        assert pl.current_track() is a
        assert pl.snapshot() == (a,)
        assert_links_consistent(pl)
