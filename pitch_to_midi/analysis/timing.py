"""Frame-to-time mapping for model output frames."""

import numpy as np
import librosa

from ..core.constants import (
    ANNOT_N_FRAMES,
    AUDIO_N_SAMPLES,
    AUDIO_SAMPLE_RATE,
    FFT_HOP,
)

# Drift accumulated per inference window: the window covers slightly
# fewer samples than ANNOT_N_FRAMES hops, plus a fixed alignment term.
WINDOW_OFFSET = (
    FFT_HOP / AUDIO_SAMPLE_RATE * (ANNOT_N_FRAMES - AUDIO_N_SAMPLES / FFT_HOP)
    + 0.0018
)


def model_frames_to_time(n_frames: int) -> np.ndarray:
    """
    Start time in seconds of every model output frame.

    Args:
        n_frames: Number of frames in the unwrapped model output

    Returns:
        Array of length n_frames with frame times in seconds
    """
    if n_frames <= 0:
        return np.zeros(0, dtype=np.float64)

    frames = np.arange(n_frames)
    original_times = librosa.frames_to_time(
        frames, sr=AUDIO_SAMPLE_RATE, hop_length=FFT_HOP
    )
    window_numbers = np.floor(frames / ANNOT_N_FRAMES)
    return original_times - window_numbers * WINDOW_OFFSET


class FrameTimeMapper:
    """Maps frame indices of one model output to seconds."""

    def __init__(self, n_frames: int):
        self.n_frames = n_frames
        self.times = model_frames_to_time(n_frames)

    def __call__(self, frame: int) -> float:
        if frame < 0 or frame >= self.n_frames:
            raise RuntimeError(
                f"Frame index {frame} out of range for {self.n_frames} frames"
            )
        return float(self.times[frame])
