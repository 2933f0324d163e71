"""MIDI export functionality."""

from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO
from pathlib import Path
from typing import Dict, List, Optional, Union

import mido
import numpy as np
import pretty_midi

from ..core import Note
from ..core.constants import (
    CONTOURS_BINS_PER_SEMITONE,
    DEFAULT_PROGRAM,
    DEFAULT_TEMPO,
    DEFAULT_TIME_SIGNATURE,
    MIDI_CHANNELS,
    N_PITCH_BEND_TICKS,
    TICKS_PER_BEAT,
)
from ..processing import drop_overlapping_pitch_bends

MAX_PITCH_WHEEL = 2 * N_PITCH_BEND_TICKS - 1


class ExportMode(Enum):
    """How notes are laid out across MIDI tracks."""

    SINGLE_TRACK = "single"  # one track/channel, overlapping bends dropped
    TRACK_PER_PITCH = "per_pitch"  # one track/channel per MIDI pitch


@dataclass
class MidiWriteOptions:
    """Options for MIDI serialization.

    Attributes:
        tempo: Tempo in BPM (default: 120)
        program: MIDI program number 0-127 (default: 4, Electric Piano 1)
        mode: Track layout (default: single track)
    """

    tempo: int = DEFAULT_TEMPO
    program: int = DEFAULT_PROGRAM
    mode: ExportMode = ExportMode.SINGLE_TRACK


@dataclass
class MidiEvent:
    """A channel message at an absolute tick."""

    tick: int
    message: mido.Message

    @property
    def score(self) -> int:
        """Secondary sort key for events sharing a tick."""
        msg = self.message
        if msg.type in ("note_on", "note_off"):
            return ((msg.channel - 1) + msg.note) * 1000 + msg.velocity
        if msg.type == "pitchwheel":
            return msg.pitch + N_PITCH_BEND_TICKS
        return 0


@dataclass
class MidiTrackEvents:
    """Events of one output track, all on a single channel."""

    channel: int
    program: int
    events: List[MidiEvent] = field(default_factory=list)

    def to_mido_track(self) -> mido.MidiTrack:
        """Convert to a mido track with delta times."""
        track = mido.MidiTrack()
        last_tick = 0
        for event in self.events:
            track.append(event.message.copy(time=event.tick - last_tick))
            last_tick = event.tick
        track.append(mido.MetaMessage("end_of_track", time=0))
        return track


def pitch_bend_to_wheel(deviation: float) -> int:
    """Convert a bend in contour bins to a 0-16383 pitch wheel value."""
    ticks = int(np.round(deviation * 4096 / CONTOURS_BINS_PER_SEMITONE)) + N_PITCH_BEND_TICKS
    return int(min(max(ticks, 0), MAX_PITCH_WHEEL))


class MidiEventSerializer:
    """
    Serialize notes into time-ordered MIDI tracks.

    Uses a fixed tempo map: one tempo, 4/4 time, ``ticks_per_beat`` ticks
    per quarter note.
    """

    def __init__(
        self,
        options: Optional[MidiWriteOptions] = None,
        ticks_per_beat: int = TICKS_PER_BEAT,
    ):
        """
        Initialize MidiEventSerializer.

        Args:
            options: MIDI write options (defaults if None)
            ticks_per_beat: Ticks per quarter note
        """
        self.options = options or MidiWriteOptions()
        self.ticks_per_beat = ticks_per_beat

    def seconds_to_ticks(self, seconds: float) -> int:
        """Convert seconds to ticks at the configured tempo."""
        if seconds <= 0:
            return 0
        beat_unit = DEFAULT_TIME_SIGNATURE[1]
        return int(round(
            seconds * self.ticks_per_beat * self.options.tempo / (15 * beat_unit)
        ))

    def serialize(self, notes: List[Note]) -> List[MidiTrackEvents]:
        """
        Build per-track event lists.

        In ``TRACK_PER_PITCH`` mode each distinct pitch gets its own track,
        with channels assigned round-robin in order of first appearance.
        Otherwise all notes share one track on channel 0.

        Args:
            notes: Notes to serialize

        Returns:
            Note tracks, each sorted by (tick, score)
        """
        per_pitch = self.options.mode == ExportMode.TRACK_PER_PITCH
        tracks: Dict[int, MidiTrackEvents] = {}
        next_channel = 0

        for note in notes:
            key = note.pitch if per_pitch else 0
            track = tracks.get(key)
            if track is None:
                channel = next_channel % MIDI_CHANNELS
                next_channel += 1
                track = MidiTrackEvents(channel=channel, program=self.options.program)
                track.events.append(MidiEvent(0, mido.Message(
                    "program_change", channel=channel, program=self.options.program,
                )))
                tracks[key] = track
            self._add_note(track, note)

        for track in tracks.values():
            track.events.sort(key=lambda e: (e.tick, e.score))

        return list(tracks.values())

    def _add_note(self, track: MidiTrackEvents, note: Note) -> None:
        channel = track.channel
        start_tick = self.seconds_to_ticks(note.start_time)
        end_tick = self.seconds_to_ticks(note.end_time)
        velocity = min(max(note.velocity, 0), 127)

        track.events.append(MidiEvent(start_tick, mido.Message(
            "note_on", channel=channel, note=note.pitch, velocity=velocity,
        )))

        if note.pitch_bend:
            bend_times = np.linspace(note.start_time, note.end_time, len(note.pitch_bend))
            for bend_time, deviation in zip(bend_times, note.pitch_bend):
                wheel = pitch_bend_to_wheel(deviation)
                track.events.append(MidiEvent(self.seconds_to_ticks(bend_time), mido.Message(
                    "pitchwheel", channel=channel, pitch=wheel - N_PITCH_BEND_TICKS,
                )))

        # note off as a zero-velocity note on
        track.events.append(MidiEvent(end_tick, mido.Message(
            "note_on", channel=channel, note=note.pitch, velocity=0,
        )))

    def meta_track(self) -> mido.MidiTrack:
        """Global track with tempo and time signature."""
        numerator, denominator = DEFAULT_TIME_SIGNATURE
        track = mido.MidiTrack()
        track.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(self.options.tempo), time=0))
        track.append(mido.MetaMessage(
            "time_signature", numerator=numerator, denominator=denominator, time=0,
        ))
        track.append(mido.MetaMessage("end_of_track", time=0))
        return track

    def to_midi_file(self, notes: List[Note]) -> mido.MidiFile:
        """Serialize notes into a type 1 MIDI file object."""
        midi = mido.MidiFile(type=1, ticks_per_beat=self.ticks_per_beat)
        midi.tracks.append(self.meta_track())
        for track in self.serialize(notes):
            midi.tracks.append(track.to_mido_track())
        return midi


class MIDIExporter:
    """Export notes to MIDI format."""

    def __init__(self, options: Optional[MidiWriteOptions] = None):
        """
        Initialize MIDIExporter.

        Args:
            options: MIDI write options (defaults if None)
        """
        self.options = options or MidiWriteOptions()
        self.serializer = MidiEventSerializer(self.options)

    def prepare_notes(self, notes: List[Note]) -> List[Note]:
        """Drop pitch bends that a shared channel can't carry."""
        if self.options.mode == ExportMode.SINGLE_TRACK:
            return drop_overlapping_pitch_bends(notes)
        return list(notes)

    def to_midi_file(self, notes: List[Note]) -> mido.MidiFile:
        """Convert notes to a mido MidiFile without saving."""
        return self.serializer.to_midi_file(self.prepare_notes(notes))

    def to_bytes(self, notes: List[Note]) -> bytes:
        """Serialize notes to Standard MIDI File bytes."""
        buffer = BytesIO()
        self.to_midi_file(notes).save(file=buffer)
        return buffer.getvalue()

    def export(self, notes: List[Note], output_path: Union[str, Path]) -> None:
        """
        Export notes to MIDI file.

        Args:
            notes: List of Note objects
            output_path: Path to output MIDI file
        """
        output_path = Path(output_path)
        # Ensure output directory exists
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.to_midi_file(notes).save(str(output_path))

    def notes_to_pretty_midi(self, notes: List[Note]) -> pretty_midi.PrettyMIDI:
        """Read the serialized notes back as a PrettyMIDI object."""
        return pretty_midi.PrettyMIDI(BytesIO(self.to_bytes(notes)))
