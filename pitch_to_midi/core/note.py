"""Note data classes - the fundamental units of transcription output."""

from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np
import librosa

from .constants import (
    ANNOTATIONS_BASE_FREQUENCY,
    CONTOURS_BINS_PER_SEMITONE,
    PITCH_NAMES,
)


def hz_to_midi(freq: float) -> int:
    """Convert frequency (Hz) to the nearest MIDI pitch (A4 = 440 Hz)."""
    if freq <= 0:
        return 0
    return int(round(float(librosa.hz_to_midi(freq))))


def midi_to_hz(pitch: int) -> float:
    """Convert MIDI pitch to frequency (Hz)."""
    return float(librosa.midi_to_hz(pitch))


def midi_pitch_to_contour_bin(pitch: int) -> float:
    """Fractional contour-matrix bin of a MIDI pitch.

    Contour bins are thirds of a semitone, with bin 0 centred on A0.
    """
    hz = midi_to_hz(pitch)
    return 12.0 * CONTOURS_BINS_PER_SEMITONE * float(np.log2(hz / ANNOTATIONS_BASE_FREQUENCY))


@dataclass
class InterNote:
    """Working note record used during extraction.

    Frame range is half-open: ``[start_frame, end_frame)``.
    """

    start_frame: int
    end_frame: int
    pitch: int  # MIDI pitch (bin index + MIDI_OFFSET)
    amplitude: float  # mean frame activation over the range
    pitch_bend: Optional[np.ndarray] = None  # one value per frame, contour bins

    @property
    def n_frames(self) -> int:
        return self.end_frame - self.start_frame


@dataclass(frozen=True)
class Note:
    """A transcribed note.

    ``pitch_bend`` holds one signed deviation per frame of the note, in
    contour-bin units (thirds of a semitone) relative to ``pitch``.
    """

    start_time: float  # seconds
    end_time: float  # seconds
    pitch: int  # MIDI pitch (0-127)
    amplitude: float  # 0-1
    pitch_bend: Optional[Tuple[float, ...]] = None

    @property
    def duration(self) -> float:
        """Note duration in seconds."""
        return self.end_time - self.start_time

    @property
    def velocity(self) -> int:
        """MIDI velocity derived from amplitude."""
        return int(round(127 * self.amplitude))

    @property
    def pitch_name(self) -> str:
        """Get note name (e.g., 'C4', 'A#3')."""
        octave = (self.pitch // 12) - 1
        return f"{PITCH_NAMES[self.pitch % 12]}{octave}"

    @property
    def sort_key(self) -> Tuple[float, float, int, float, int]:
        """Ordering key: start, end, pitch, amplitude, then bend length.

        Notes without a pitch bend sort before notes with one.
        """
        n_bend = -1 if self.pitch_bend is None else len(self.pitch_bend)
        return (self.start_time, self.end_time, self.pitch, self.amplitude, n_bend)

    def without_pitch_bend(self) -> "Note":
        """Copy of this note with the pitch bend dropped."""
        return Note(self.start_time, self.end_time, self.pitch, self.amplitude, None)

    def __str__(self) -> str:
        bend = self.pitch_bend or ()
        return (
            f"start: {self.start_time:.4f}, end: {self.end_time:.4f}, "
            f"pitch: {self.pitch}, amplitude: {self.amplitude:.4f}, "
            f"bend: {len(bend)}[{','.join(f'{b:g}' for b in bend)}]"
        )
