"""Polyphonic note extraction from onset and frame activations."""

import numpy as np
from scipy.signal import argrelmax
from typing import List, Tuple

from ..core import InterNote
from ..core.constants import MIDI_OFFSET


class PolyphonicNoteExtractor:
    """
    Extract polyphonic note events from onset and frame activation matrices.

    Notes are started at local maxima of the onset matrix and grown forward
    while the frame activation stays above ``frame_threshold``, tolerating
    up to ``energy_threshold - 1`` consecutive weak frames. Energy claimed
    by a note is removed from a working copy of the frame matrix. With
    ``melodia_trick`` enabled, the remaining energy is then swept from its
    global maximum outwards to recover notes that had no detectable onset.
    """

    def __init__(
        self,
        onset_threshold: float = 0.5,
        frame_threshold: float = 0.3,
        min_note_length: int = 11,
        energy_threshold: int = 11,
        melodia_trick: bool = True,
    ):
        """
        Initialize PolyphonicNoteExtractor.

        Args:
            onset_threshold: Minimum onset activation to start a note
            frame_threshold: Minimum frame activation for a note to stay on
            min_note_length: Notes must be longer than this many frames
            energy_threshold: Consecutive weak frames that end a note
            melodia_trick: Recover notes from leftover energy
        """
        self.onset_threshold = onset_threshold
        self.frame_threshold = frame_threshold
        self.min_note_length = min_note_length
        self.energy_threshold = energy_threshold
        self.melodia_trick = melodia_trick

    def extract(self, onsets: np.ndarray, frames: np.ndarray) -> List[InterNote]:
        """
        Extract note events.

        Args:
            onsets: Onset activation matrix (n_frames, n_bins)
            frames: Frame activation matrix (n_frames, n_bins)

        Returns:
            List of InterNote, in extraction order
        """
        if frames.size == 0:
            return []

        remaining_energy = frames.astype(np.float32, copy=True)
        notes = self._extract_from_onsets(onsets, frames, remaining_energy)

        if self.melodia_trick:
            notes.extend(self._extract_from_energy(frames, remaining_energy))

        return notes

    def find_onset_peaks(self, onsets: np.ndarray) -> List[Tuple[int, int]]:
        """
        Find onset candidates: local maxima in time above the threshold.

        Returns:
            (frame, bin) pairs in descending flat-index order (latest first)
        """
        if onsets.shape[0] < 3:
            return []

        rows, cols = argrelmax(onsets, axis=0)
        keep = onsets[rows, cols] >= self.onset_threshold
        rows, cols = rows[keep], cols[keep]

        flat = rows * onsets.shape[1] + cols
        order = np.argsort(flat)[::-1]
        return [(int(rows[i]), int(cols[i])) for i in order]

    def _extract_from_onsets(
        self,
        onsets: np.ndarray,
        frames: np.ndarray,
        remaining_energy: np.ndarray,
    ) -> List[InterNote]:
        n_frames, n_bins = frames.shape
        notes = []

        for note_start, freq_idx in self.find_onset_peaks(onsets):
            if note_start >= n_frames - 1:
                continue

            i = note_start + 1
            k = 0
            while i < n_frames - 1 and k < self.energy_threshold:
                if remaining_energy[i, freq_idx] < self.frame_threshold:
                    k += 1
                else:
                    k = 0
                i += 1

            # back off the trailing run of weak frames
            i -= k

            if i - note_start <= self.min_note_length:
                continue

            self._check_bounds(note_start, i, n_frames)

            col_lo = max(freq_idx - 1, 0)
            col_hi = min(freq_idx + 2, n_bins)
            remaining_energy[note_start:i, col_lo:col_hi] = 0

            amplitude = float(np.mean(frames[note_start:i, freq_idx]))
            notes.append(
                InterNote(note_start, i, freq_idx + MIDI_OFFSET, amplitude)
            )

        return notes

    def _extract_from_energy(
        self,
        frames: np.ndarray,
        remaining_energy: np.ndarray,
    ) -> List[InterNote]:
        """Melodia trick: grow notes from the global maximum of leftover energy."""
        n_frames, n_bins = frames.shape
        notes = []

        while True:
            max_idx = int(np.argmax(remaining_energy))
            i_mid, freq_idx = divmod(max_idx, n_bins)
            if remaining_energy[i_mid, freq_idx] <= self.frame_threshold:
                break

            remaining_energy[i_mid, freq_idx] = 0
            col_lo = max(freq_idx - 1, 0)
            col_hi = min(freq_idx + 2, n_bins)

            # forward
            i = i_mid + 1
            k = 0
            while i < n_frames - 1 and k < self.energy_threshold:
                if remaining_energy[i, freq_idx] < self.frame_threshold:
                    k += 1
                else:
                    k = 0
                remaining_energy[i, col_lo:col_hi] = 0
                i += 1
            i_end = i - 1 - k

            # backward
            i = i_mid - 1
            k = 0
            while i > 0 and k < self.energy_threshold:
                if remaining_energy[i, freq_idx] < self.frame_threshold:
                    k += 1
                else:
                    k = 0
                remaining_energy[i, col_lo:col_hi] = 0
                i -= 1
            i_start = i + 1 + k

            self._check_bounds(i_start, i_end, n_frames)

            if i_end - i_start <= self.min_note_length:
                continue

            amplitude = float(np.mean(frames[i_start:i_end, freq_idx]))
            notes.append(
                InterNote(i_start, i_end, freq_idx + MIDI_OFFSET, amplitude)
            )

        return notes

    @staticmethod
    def _check_bounds(start: int, end: int, n_frames: int) -> None:
        if start < 0:
            raise RuntimeError(f"Note start frame is {start}")
        if end >= n_frames:
            raise RuntimeError(f"Note end frame is {end}, n_frames is {n_frames}")
