"""Per-note pitch bend estimation from the pitch contour matrix."""

from typing import List
import numpy as np
from scipy.signal.windows import gaussian

from ..core import InterNote, midi_pitch_to_contour_bin


class PitchBendEstimator:
    """
    Estimate a pitch bend curve for every note.

    For each frame of a note, the contour row around the note's nominal
    contour bin is weighted by a Gaussian window and the position of the
    maximum gives the bend, in contour bins relative to the nominal bin.
    """

    def __init__(self, n_bins_tolerance: int = 25, std: float = 5.0):
        """
        Initialize PitchBendEstimator.

        Args:
            n_bins_tolerance: Half-width of the search window, in contour bins
            std: Standard deviation of the Gaussian weighting, in contour bins
        """
        self.n_bins_tolerance = n_bins_tolerance
        self.window = gaussian(2 * n_bins_tolerance + 1, std=std)

    def estimate(self, contours: np.ndarray, notes: List[InterNote]) -> List[InterNote]:
        """
        Attach ``pitch_bend`` arrays to notes in place.

        Args:
            contours: Contour matrix (n_frames, n_contour_bins)
            notes: Notes to annotate

        Returns:
            The same list of notes
        """
        if contours.size == 0 or not notes:
            return notes

        n_contour_bins = contours.shape[1]
        tol = self.n_bins_tolerance
        window_len = len(self.window)

        for note in notes:
            freq_idx = int(round(midi_pitch_to_contour_bin(note.pitch)))
            freq_start = max(freq_idx - tol, 0)
            freq_end = min(n_contour_bins, freq_idx + tol + 1)

            gauss_start = max(tol - freq_idx, 0)
            gauss_end = window_len - max(freq_idx - (n_contour_bins - tol - 1), 0)
            if gauss_end - gauss_start != freq_end - freq_start:
                raise RuntimeError(
                    f"Pitch bend window mismatch for pitch {note.pitch}: "
                    f"contour bins [{freq_start}, {freq_end}), "
                    f"gaussian [{gauss_start}, {gauss_end})"
                )

            submatrix = (
                contours[note.start_frame:note.end_frame, freq_start:freq_end]
                * self.window[gauss_start:gauss_end]
            )
            if submatrix.shape[0] == 0 or submatrix.shape[1] == 0:
                continue

            pb_shift = tol - max(0, tol - freq_idx)
            note.pitch_bend = (np.argmax(submatrix, axis=1) - pb_shift).astype(np.float32)

        return notes
