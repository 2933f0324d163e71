"""Tests for MIDI serialization and export."""

from io import BytesIO

import mido
import pytest

from pitch_to_midi.core import Note
from pitch_to_midi.output import (
    ExportMode,
    MidiEvent,
    MidiEventSerializer,
    MIDIExporter,
    MidiWriteOptions,
    pitch_bend_to_wheel,
)


def _channel_messages(track):
    return [msg for msg in track if not msg.is_meta]


@pytest.fixture
def serializer():
    return MidiEventSerializer()


@pytest.fixture
def per_pitch_serializer():
    return MidiEventSerializer(MidiWriteOptions(mode=ExportMode.TRACK_PER_PITCH))


class TestTicks:
    """Tests for seconds to tick conversion."""

    def test_default_tempo(self, serializer):
        """Half a second is one beat at 120 BPM."""
        assert serializer.seconds_to_ticks(0.5) == 480
        assert serializer.seconds_to_ticks(1.0) == 960

    def test_non_positive(self, serializer):
        """Times at or before zero map to tick 0."""
        assert serializer.seconds_to_ticks(0.0) == 0
        assert serializer.seconds_to_ticks(-1.0) == 0

    def test_tempo_scales_ticks(self):
        """Slower tempos give fewer ticks per second."""
        serializer = MidiEventSerializer(MidiWriteOptions(tempo=60))
        assert serializer.seconds_to_ticks(1.0) == 480

    def test_monotonic(self, serializer):
        """Later times never map to earlier ticks."""
        ticks = [serializer.seconds_to_ticks(t / 100) for t in range(500)]
        assert ticks == sorted(ticks)


class TestPitchWheel:
    """Tests for pitch_bend_to_wheel."""

    def test_centre(self):
        """No bend is the wheel centre."""
        assert pitch_bend_to_wheel(0.0) == 8192

    def test_semitone_is_4096(self):
        """Three contour bins (one semitone) move the wheel by 4096."""
        assert pitch_bend_to_wheel(3.0) == 12288
        assert pitch_bend_to_wheel(-3.0) == 4096
        assert pitch_bend_to_wheel(1.0) == 9557

    def test_clamped(self):
        """Bends beyond two semitones are clamped to the wheel range."""
        assert pitch_bend_to_wheel(-6.0) == 0
        assert pitch_bend_to_wheel(6.0) == 16383
        assert pitch_bend_to_wheel(25.0) == 16383
        assert pitch_bend_to_wheel(-25.0) == 0


class TestMidiEvent:
    """Tests for same-tick event ordering."""

    def test_note_off_before_note_on(self):
        """A note off sorts before a note on of the same pitch."""
        on = MidiEvent(0, mido.Message("note_on", channel=0, note=60, velocity=64))
        off = MidiEvent(0, mido.Message("note_on", channel=0, note=60, velocity=0))
        assert off.score < on.score

    def test_lower_pitch_first(self):
        """Lower pitches sort first regardless of velocity."""
        low = MidiEvent(0, mido.Message("note_on", channel=0, note=60, velocity=127))
        high = MidiEvent(0, mido.Message("note_on", channel=0, note=61, velocity=0))
        assert low.score < high.score

    def test_other_messages(self):
        """Pitch wheels sort by value and other messages score zero."""
        wheel = MidiEvent(0, mido.Message("pitchwheel", channel=0, pitch=100))
        program = MidiEvent(0, mido.Message("program_change", channel=0, program=4))
        assert wheel.score == 8292
        assert program.score == 0


class TestMidiEventSerializer:
    """Tests for MidiEventSerializer."""

    def test_single_track_layout(self, serializer):
        """Single-track mode puts all notes on one channel in time order."""
        notes = [
            Note(0.0, 0.5, 60, 0.5),
            Note(0.5, 1.0, 60, 1.0),
        ]
        tracks = serializer.serialize(notes)

        assert len(tracks) == 1
        messages = [(e.tick, e.message.type, getattr(e.message, "velocity", None))
                    for e in tracks[0].events]
        assert messages == [
            (0, "program_change", None),
            (0, "note_on", 64),
            (480, "note_on", 0),
            (480, "note_on", 127),
            (960, "note_on", 0),
        ]

    def test_events_sorted(self, serializer):
        """Events are ordered by tick then score."""
        notes = [Note(1.0, 2.0, 64, 0.5), Note(0.0, 1.5, 60, 0.5)]
        events = serializer.serialize(notes)[0].events
        keys = [(e.tick, e.score) for e in events]
        assert keys == sorted(keys)

    def test_program(self):
        """The program change uses the configured program."""
        serializer = MidiEventSerializer(MidiWriteOptions(program=33))
        track = serializer.serialize([Note(0.0, 1.0, 40, 0.5)])[0]
        assert track.program == 33
        assert track.events[0].message.program == 33

    def test_pitch_bend_events(self, serializer):
        """Bends become pitch wheel events spread over the note."""
        note = Note(0.0, 1.0, 60, 0.5, (0.0, 3.0))
        events = serializer.serialize([note])[0].events

        wheels = [(e.tick, e.message.pitch) for e in events if e.message.type == "pitchwheel"]
        assert wheels == [(0, 0), (960, 4096)]
        assert [e.message.type for e in events] == [
            "program_change", "pitchwheel", "note_on", "pitchwheel", "note_on",
        ]

    def test_track_per_pitch(self, per_pitch_serializer):
        """Each pitch gets its own track and channel."""
        notes = [
            Note(0.0, 1.0, 64, 0.5),
            Note(0.0, 1.0, 60, 0.5),
            Note(1.0, 2.0, 64, 0.5),
        ]
        tracks = per_pitch_serializer.serialize(notes)

        assert [t.channel for t in tracks] == [0, 1]
        for track in tracks:
            channels = {e.message.channel for e in track.events}
            assert channels == {track.channel}
        assert sum(1 for e in tracks[0].events if e.message.type == "note_on") == 4

    def test_channels_wrap_after_sixteen(self, per_pitch_serializer):
        """Channels are assigned round-robin over the 16 MIDI channels."""
        notes = [Note(0.0, 1.0, 40 + i, 0.5) for i in range(18)]
        tracks = per_pitch_serializer.serialize(notes)
        assert [t.channel for t in tracks] == list(range(16)) + [0, 1]

    def test_channel_assignment_is_per_call(self, per_pitch_serializer):
        """Channel assignment restarts on every call."""
        notes = [Note(0.0, 1.0, 60, 0.5), Note(0.0, 1.0, 62, 0.5)]
        first = [t.channel for t in per_pitch_serializer.serialize(notes)]
        second = [t.channel for t in per_pitch_serializer.serialize(notes)]
        assert first == second == [0, 1]

    def test_meta_track(self, serializer):
        """The meta track carries tempo and a 4/4 time signature."""
        meta = serializer.meta_track()
        tempo = next(m for m in meta if m.type == "set_tempo")
        signature = next(m for m in meta if m.type == "time_signature")
        assert tempo.tempo == 500000
        assert (signature.numerator, signature.denominator) == (4, 4)
        assert meta[-1].type == "end_of_track"

    def test_to_midi_file(self, serializer):
        """The MIDI file has a meta track plus delta-timed note tracks."""
        midi = serializer.to_midi_file([Note(0.0, 0.5, 60, 0.5)])
        assert midi.type == 1
        assert midi.ticks_per_beat == 480
        assert len(midi.tracks) == 2

        messages = _channel_messages(midi.tracks[1])
        assert [m.time for m in messages] == [0, 0, 480]
        assert midi.tracks[1][-1].type == "end_of_track"

    def test_empty(self, serializer):
        """No notes means no note tracks."""
        assert serializer.serialize([]) == []
        assert len(serializer.to_midi_file([]).tracks) == 1


class TestMIDIExporter:
    """Tests for MIDIExporter."""

    @pytest.fixture
    def overlapping_bent_notes(self):
        return [
            Note(0.0, 1.0, 60, 0.5, (0.0, 1.0, 2.0)),
            Note(0.5, 1.5, 64, 0.5, (0.0, -1.0)),
        ]

    def test_single_track_drops_overlapping_bends(self, overlapping_bent_notes):
        """Overlapping notes sharing a channel lose their bends."""
        midi = MIDIExporter().to_midi_file(overlapping_bent_notes)
        assert not any(m.type == "pitchwheel" for m in midi.tracks[1])

    def test_per_pitch_keeps_bends(self, overlapping_bent_notes):
        """Track-per-pitch mode keeps all bends."""
        exporter = MIDIExporter(MidiWriteOptions(mode=ExportMode.TRACK_PER_PITCH))
        midi = exporter.to_midi_file(overlapping_bent_notes)

        assert len(midi.tracks) == 3
        wheel_counts = [sum(1 for m in t if m.type == "pitchwheel") for t in midi.tracks[1:]]
        assert wheel_counts == [3, 2]

    def test_export(self, tmp_path):
        """Export writes a file mido can read back."""
        notes = [Note(0.0, 0.5, 60, 0.5), Note(0.5, 1.0, 62, 0.7)]
        path = tmp_path / "out" / "song.mid"
        MIDIExporter().export(notes, path)

        assert path.exists()
        midi = mido.MidiFile(str(path))
        assert len(midi.tracks) == 2
        note_ons = [m for m in midi.tracks[1] if m.type == "note_on" and m.velocity > 0]
        assert [m.note for m in note_ons] == [60, 62]

    def test_to_bytes(self):
        """Bytes form a valid Standard MIDI File."""
        data = MIDIExporter().to_bytes([Note(0.0, 0.5, 60, 0.5)])
        assert data[:4] == b"MThd"
        midi = mido.MidiFile(file=BytesIO(data))
        assert len(midi.tracks) == 2

    def test_pretty_midi_read_back(self):
        """PrettyMIDI reads back pitches, times and velocities."""
        notes = [Note(0.0, 0.5, 60, 0.5), Note(1.0, 2.0, 67, 1.0)]
        pm = MIDIExporter().notes_to_pretty_midi(notes)

        assert len(pm.instruments) == 1
        instrument = pm.instruments[0]
        assert instrument.program == 4
        read = [(n.pitch, n.start, n.end, n.velocity) for n in instrument.notes]
        assert read == [
            (60, pytest.approx(0.0), pytest.approx(0.5), 64),
            (67, pytest.approx(1.0), pytest.approx(2.0), 127),
        ]

    def test_pretty_midi_pitch_bends(self):
        """PrettyMIDI sees the exported pitch bends."""
        pm = MIDIExporter().notes_to_pretty_midi([Note(0.0, 1.0, 60, 0.5, (0.0, 3.0))])
        assert [b.pitch for b in pm.instruments[0].pitch_bends] == [0, 4096]

    def test_empty(self):
        """An empty export still has the meta track."""
        midi = MIDIExporter().to_midi_file([])
        assert len(midi.tracks) == 1
