"""Core types and constants for pitch-to-midi."""

from .note import (
    Note,
    InterNote,
    hz_to_midi,
    midi_to_hz,
    midi_pitch_to_contour_bin,
)
from .model_output import ModelOutput, unwrap_output
from .constants import (
    PITCH_NAMES,
    AUDIO_SAMPLE_RATE,
    FFT_HOP,
    MIDI_OFFSET,
    DEFAULT_TEMPO,
)

__all__ = [
    "Note",
    "InterNote",
    "ModelOutput",
    "unwrap_output",
    "hz_to_midi",
    "midi_to_hz",
    "midi_pitch_to_contour_bin",
    "PITCH_NAMES",
    "AUDIO_SAMPLE_RATE",
    "FFT_HOP",
    "MIDI_OFFSET",
    "DEFAULT_TEMPO",
]
