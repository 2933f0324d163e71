"""Transcription layer - Note-level detection from model output.

This layer converts the pitch model's activation matrices into discrete
note events:
- Polyphonic note extraction (onset peaks + energy tracking)
- Leftover-energy sweep for notes without a detected onset
- Per-note pitch bend estimation from the contour matrix
"""

from .polyphonic import PolyphonicNoteExtractor
from .pitch_bend import PitchBendEstimator
from .converter import NotesConverter, NotesConvertOptions

__all__ = [
    "PolyphonicNoteExtractor",
    "PitchBendEstimator",
    "NotesConverter",
    "NotesConvertOptions",
]
