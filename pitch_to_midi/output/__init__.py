"""Output layer - Export to MIDI.

This layer turns notes into time-ordered MIDI event tracks and writes
Standard MIDI Files.
"""

from .midi import (
    ExportMode,
    MidiWriteOptions,
    MidiEvent,
    MidiTrackEvents,
    MidiEventSerializer,
    MIDIExporter,
    pitch_bend_to_wheel,
)

__all__ = [
    "ExportMode",
    "MidiWriteOptions",
    "MidiEvent",
    "MidiTrackEvents",
    "MidiEventSerializer",
    "MIDIExporter",
    "pitch_bend_to_wheel",
]
