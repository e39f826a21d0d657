import mido
import pytest


class FakePort:
    """Stands in for a mido output port; records sent messages."""

    def __init__(self):
        self.sent = []
        self.closed = False

    def send(self, msg):
        self.sent.append(msg)

    def close(self):
        self.closed = True

    def notes(self):
        return [m for m in self.sent if m.type == 'note_on']


def write_midi(path, notes=(60, 62, 64), ticks_per_note=0, name=None, program=5):
    """Write a one-track MIDI file. ticks_per_note=0 makes every event instant."""
    mid = mido.MidiFile(ticks_per_beat=480)
    track = mido.MidiTrack()
    mid.tracks.append(track)
    if name:
        track.append(mido.MetaMessage('track_name', name=name, time=0))
    track.append(mido.Message('program_change', program=program, time=0))
    for note in notes:
        track.append(mido.Message('note_on', note=note, velocity=100, time=0))
        track.append(mido.Message('note_off', note=note, velocity=0, time=ticks_per_note))
    mid.save(str(path))
    return str(path)


@pytest.fixture
def fake_port():
    return FakePort()


@pytest.fixture
def midi_file(tmp_path):
    """Factory: midi_file('name.mid', **write_midi kwargs) -> path."""
    def make(filename='song.mid', **kwargs):
        return write_midi(tmp_path / filename, **kwargs)
    return make
