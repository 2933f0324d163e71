"""Processing layer - Matrix and note post-processing.

This layer prepares model output for note extraction and prepares notes
for export:
- Frequency constraint (zero bins outside a pitch range)
- Onset inference (onsets from activation differences)
- Overlap resolution (drop pitch bends a single channel can't carry)
"""

from .constrain import constrain_frequency
from .onsets import infer_onsets
from .overlap import drop_overlapping_pitch_bends

__all__ = [
    "constrain_frequency",
    "infer_onsets",
    "drop_overlapping_pitch_bends",
]
