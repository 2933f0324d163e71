"""Shared fixtures: synthetic model output with known ground truth."""

import numpy as np
import pytest

from pitch_to_midi.core.constants import N_FREQ_BINS_CONTOURS, N_FREQ_BINS_NOTES


def blank_matrices(n_frames: int):
    """All-zero onset, frame and contour matrices."""
    onsets = np.zeros((n_frames, N_FREQ_BINS_NOTES), dtype=np.float32)
    frames = np.zeros((n_frames, N_FREQ_BINS_NOTES), dtype=np.float32)
    contours = np.zeros((n_frames, N_FREQ_BINS_CONTOURS), dtype=np.float32)
    return onsets, frames, contours


def add_note(onsets, frames, start: int, end: int, freq_idx: int,
             onset_value: float = 0.9, frame_value: float = 0.8):
    """Sustained activation over [start, end) with an onset peak at start."""
    frames[start:end, freq_idx] = frame_value
    if onset_value:
        onsets[start, freq_idx] = onset_value


@pytest.fixture
def single_note_matrices():
    """One note: pitch 60 (bin 39), frames 5-25, contour bent up one bin."""
    onsets, frames, contours = blank_matrices(60)
    add_note(onsets, frames, 5, 25, 39)
    contours[5:25, 118] = 1.0  # pitch 60 is contour bin 117
    return onsets, frames, contours


@pytest.fixture
def random_matrices():
    """Noisy activations for property checks."""
    rng = np.random.default_rng(1234)
    onsets = (rng.random((120, N_FREQ_BINS_NOTES)) ** 4).astype(np.float32)
    frames = (rng.random((120, N_FREQ_BINS_NOTES)) ** 2).astype(np.float32)
    contours = rng.random((120, N_FREQ_BINS_CONTOURS)).astype(np.float32)
    return onsets, frames, contours
