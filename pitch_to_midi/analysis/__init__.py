"""Analysis layer - Frame timing of model output.

Converts the model's annotation frame grid to seconds, compensating for
the overlap trimming of the inference windows.
"""

from .timing import FrameTimeMapper, model_frames_to_time, WINDOW_OFFSET

__all__ = [
    "FrameTimeMapper",
    "model_frames_to_time",
    "WINDOW_OFFSET",
]
