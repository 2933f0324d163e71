"""Onset inference from changes in note activation."""

import numpy as np


def infer_onsets(onsets: np.ndarray, frames: np.ndarray, n_diff: int = 2) -> np.ndarray:
    """
    Infer onsets from large increases in frame activation.

    For each shift in ``1..n_diff`` the activation difference
    ``frames[t] - frames[t - shift]`` is computed; the element-wise minimum
    over all shifts, clipped at zero and rescaled to the peak of the onset
    matrix, is merged with the predicted onsets by element-wise maximum.

    Args:
        onsets: Onset activation matrix (n_frames, n_bins)
        frames: Frame activation matrix (n_frames, n_bins)
        n_diff: Number of frame shifts to difference over

    Returns:
        Onset matrix with inferred onsets added
    """
    if frames.size == 0:
        return onsets.copy()

    n_frames = frames.shape[0]
    diffs = np.empty((n_diff,) + frames.shape, dtype=frames.dtype)
    for i, shift in enumerate(range(1, n_diff + 1)):
        previous = np.zeros_like(frames)
        if shift < n_frames:
            previous[shift:] = frames[:-shift]
        diffs[i] = frames - previous

    frame_diff = np.min(diffs, axis=0)
    frame_diff[frame_diff < 0] = 0
    frame_diff[:n_diff, :] = 0

    max_diff = np.max(frame_diff)
    if max_diff != 0:
        frame_diff = np.max(onsets) * frame_diff / max_diff

    return np.maximum(frame_diff, onsets)
