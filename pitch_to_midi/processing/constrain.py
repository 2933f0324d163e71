"""Frequency constraint - zero activations outside a pitch range."""

from typing import Optional, Tuple
import warnings
import numpy as np

from ..core import hz_to_midi
from ..core.constants import MIDI_OFFSET


def _zero_columns(matrix: np.ndarray, start: int, stop: int) -> None:
    n_bins = matrix.shape[1]
    start = min(max(start, 0), n_bins)
    stop = min(max(stop, 0), n_bins)
    if start < stop:
        matrix[:, start:stop] = 0


def constrain_frequency(
    onsets: np.ndarray,
    frames: np.ndarray,
    max_freq: Optional[float] = None,
    min_freq: Optional[float] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Zero onset/frame activations above ``max_freq`` and below ``min_freq``.

    The inputs are returned as-is when neither bound is set. Otherwise
    both matrices are copied before masking, so the caller's arrays are
    never modified.

    Args:
        onsets: Onset activation matrix (n_frames, 88)
        frames: Frame activation matrix (n_frames, 88)
        max_freq: Highest frequency to keep, in Hz
        min_freq: Lowest frequency to keep, in Hz

    Returns:
        Tuple of (onsets, frames)
    """
    if max_freq is None and min_freq is None:
        return onsets, frames

    if max_freq is not None and min_freq is not None and min_freq >= max_freq:
        warnings.warn(
            f"min_freq ({min_freq} Hz) is not below max_freq ({max_freq} Hz); "
            "all pitches will be masked"
        )

    onsets = onsets.copy()
    frames = frames.copy()

    if max_freq is not None:
        max_idx = hz_to_midi(max_freq) - MIDI_OFFSET
        _zero_columns(onsets, max_idx, onsets.shape[1])
        _zero_columns(frames, max_idx, frames.shape[1])

    if min_freq is not None:
        min_idx = hz_to_midi(min_freq) - MIDI_OFFSET
        _zero_columns(onsets, 0, min_idx)
        _zero_columns(frames, 0, min_idx)

    return onsets, frames
