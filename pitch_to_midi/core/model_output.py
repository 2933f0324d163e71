"""Container for the three probability matrices produced by the pitch model."""

from dataclasses import dataclass
from pathlib import Path
from typing import Union
import numpy as np

from .constants import (
    ANNOTATIONS_FPS,
    AUDIO_SAMPLE_RATE,
    N_FREQ_BINS_CONTOURS,
    N_FREQ_BINS_NOTES,
    N_OVERLAPPING_FRAMES,
)


def unwrap_output(
    output: np.ndarray,
    audio_original_length: int,
    n_overlapping_frames: int = N_OVERLAPPING_FRAMES,
) -> np.ndarray:
    """Unwrap windowed model predictions into a single matrix.

    Half of the overlapping frames are removed from both ends of every
    window, the windows are concatenated, and the result is trimmed to the
    number of frames covered by the original audio.

    Args:
        output: Array of shape (n_windows, n_frames_per_window, n_bins)
        audio_original_length: Length of the original audio in samples
        n_overlapping_frames: Number of overlapping frames between windows

    Returns:
        Array of shape (n_frames, n_bins)
    """
    output = np.asarray(output, dtype=np.float32)
    if output.ndim != 3:
        raise ValueError(f"Expected a 3-D windowed output, got shape {output.shape}")

    n_olap = int(0.5 * n_overlapping_frames)
    if n_olap > 0:
        output = output[:, n_olap:-n_olap, :]

    n_windows, n_frames, n_bins = output.shape
    n_output_frames_original = int(
        np.floor(audio_original_length * (ANNOTATIONS_FPS / AUDIO_SAMPLE_RATE))
    )
    unwrapped = output.reshape(n_windows * n_frames, n_bins)
    return unwrapped[:n_output_frames_original, :]


@dataclass
class ModelOutput:
    """Onset, frame and contour matrices for one piece of audio.

    Attributes:
        onsets: (n_frames, 88) onset probabilities
        frames: (n_frames, 88) note-activation probabilities
        contours: (n_frames, 264) pitch-contour probabilities
    """

    onsets: np.ndarray
    frames: np.ndarray
    contours: np.ndarray

    def __post_init__(self):
        self.onsets = self._as_matrix(self.onsets, "onsets", N_FREQ_BINS_NOTES)
        self.frames = self._as_matrix(self.frames, "frames", N_FREQ_BINS_NOTES)
        self.contours = self._as_matrix(self.contours, "contours", N_FREQ_BINS_CONTOURS)

        n = self.onsets.shape[0]
        if self.frames.shape[0] != n or self.contours.shape[0] != n:
            raise ValueError(
                "Frame count mismatch: "
                f"onsets={self.onsets.shape[0]}, frames={self.frames.shape[0]}, "
                f"contours={self.contours.shape[0]}"
            )

    @staticmethod
    def _as_matrix(data, name: str, n_bins: int) -> np.ndarray:
        matrix = np.asarray(data, dtype=np.float32)
        if matrix.ndim != 2:
            raise ValueError(f"{name} must be 2-D (frames x bins), got shape {matrix.shape}")
        if matrix.shape[0] > 0 and matrix.shape[1] != n_bins:
            raise ValueError(f"{name} must have {n_bins} bins, got {matrix.shape[1]}")
        if matrix.shape[0] == 0:
            matrix = matrix.reshape(0, n_bins)
        return matrix

    @property
    def n_frames(self) -> int:
        """Number of analysis frames."""
        return self.frames.shape[0]

    @property
    def duration(self) -> float:
        """Approximate covered duration in seconds."""
        return self.n_frames / ANNOTATIONS_FPS

    @classmethod
    def from_windows(
        cls,
        onsets: np.ndarray,
        frames: np.ndarray,
        contours: np.ndarray,
        audio_original_length: int,
        n_overlapping_frames: int = N_OVERLAPPING_FRAMES,
    ) -> "ModelOutput":
        """Build from windowed (n_windows, frames, bins) predictions."""
        return cls(
            onsets=unwrap_output(onsets, audio_original_length, n_overlapping_frames),
            frames=unwrap_output(frames, audio_original_length, n_overlapping_frames),
            contours=unwrap_output(contours, audio_original_length, n_overlapping_frames),
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> "ModelOutput":
        """Load matrices saved with ``numpy.savez``.

        Expected keys are ``onset``, ``note`` (or ``frame``) and ``contour``.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Model output not found: {path}")

        with np.load(path) as data:
            keys = set(data.files)
            frame_key = "note" if "note" in keys else "frame"
            missing = {"onset", frame_key, "contour"} - keys
            if missing:
                raise ValueError(
                    f"Missing arrays in {path.name}: {sorted(missing)}. "
                    f"Found: {sorted(keys)}"
                )
            return cls(
                onsets=data["onset"],
                frames=data[frame_key],
                contours=data["contour"],
            )

    def save(self, path: Union[str, Path]) -> None:
        """Save matrices with ``numpy.savez_compressed``."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        np.savez_compressed(
            path, onset=self.onsets, note=self.frames, contour=self.contours
        )
