"""pitch-to-midi - Pitch model activations to notes and MIDI.

Architecture Layers:
    1. core/          - Note types, model output container, constants
    2. analysis/      - Frame timing of model output
    3. processing/    - Frequency constraint, onset inference, overlap resolution
    4. transcription/ - Note extraction and pitch bend estimation
    5. output/        - MIDI event serialization and export
"""

__version__ = "0.1.0"

# Core types
from .core import Note, InterNote, ModelOutput, unwrap_output

# Analysis layer
from .analysis import FrameTimeMapper, model_frames_to_time

# Processing layer
from .processing import (
    constrain_frequency,
    infer_onsets,
    drop_overlapping_pitch_bends,
)

# Transcription layer
from .transcription import (
    PolyphonicNoteExtractor,
    PitchBendEstimator,
    NotesConverter,
    NotesConvertOptions,
)

# Output layer
from .output import (
    ExportMode,
    MidiWriteOptions,
    MidiEventSerializer,
    MIDIExporter,
)

__all__ = [
    # Core
    "Note",
    "InterNote",
    "ModelOutput",
    "unwrap_output",
    # Analysis
    "FrameTimeMapper",
    "model_frames_to_time",
    # Processing
    "constrain_frequency",
    "infer_onsets",
    "drop_overlapping_pitch_bends",
    # Transcription
    "PolyphonicNoteExtractor",
    "PitchBendEstimator",
    "NotesConverter",
    "NotesConvertOptions",
    # Output
    "ExportMode",
    "MidiWriteOptions",
    "MidiEventSerializer",
    "MIDIExporter",
]
