"""Model output to note conversion pipeline."""

from dataclasses import dataclass
from typing import List, Optional

from ..core import ModelOutput, Note, InterNote
from ..analysis import FrameTimeMapper
from ..processing import constrain_frequency, infer_onsets
from .polyphonic import PolyphonicNoteExtractor
from .pitch_bend import PitchBendEstimator


@dataclass
class NotesConvertOptions:
    """Options for converting model output to notes.

    Attributes:
        onset_threshold: Onset activation needed to start a note, higher
            splits fewer notes (default: 0.5, sensible range 0.05-0.95)
        frame_threshold: Frame activation needed to keep a note sounding,
            higher keeps fewer notes (default: 0.3, sensible range 0.05-0.95)
        min_note_length: Notes must span more than this many frames
            (default: 11). Compared against frame counts as-is, with no
            millisecond conversion.
        energy_threshold: Consecutive weak frames that end a note (default: 11)
        min_freq: Lowest pitch to keep, in Hz (default: None = no limit)
        max_freq: Highest pitch to keep, in Hz (default: None = no limit)
        infer_onsets: Add onsets inferred from frame activation jumps
        include_pitch_bends: Estimate per-note pitch bends
        melodia_trick: Recover notes from leftover frame energy
    """

    onset_threshold: float = 0.5
    frame_threshold: float = 0.3
    min_note_length: int = 11
    energy_threshold: int = 11
    min_freq: Optional[float] = None
    max_freq: Optional[float] = None
    infer_onsets: bool = True
    include_pitch_bends: bool = True
    melodia_trick: bool = True


class NotesConverter:
    """Convert onset/frame/contour matrices to a list of notes.

    Pipeline: frequency constraint -> onset inference -> polyphonic note
    extraction -> pitch bend estimation -> frame to time conversion.
    """

    def __init__(self, model_output: ModelOutput):
        self.model_output = model_output

    def convert(self, options: Optional[NotesConvertOptions] = None) -> List[Note]:
        """
        Run the full conversion.

        Args:
            options: Conversion options (defaults if None)

        Returns:
            List of notes in extraction order
        """
        options = options or NotesConvertOptions()
        notes = self.to_inter_notes(options)
        if options.include_pitch_bends:
            PitchBendEstimator().estimate(self.model_output.contours, notes)
        return self._to_notes(notes)

    def to_inter_notes(self, options: NotesConvertOptions) -> List[InterNote]:
        """Extract notes as frame ranges, without pitch bends."""
        onsets, frames = constrain_frequency(
            self.model_output.onsets,
            self.model_output.frames,
            max_freq=options.max_freq,
            min_freq=options.min_freq,
        )
        if options.infer_onsets:
            onsets = infer_onsets(onsets, frames)

        extractor = PolyphonicNoteExtractor(
            onset_threshold=options.onset_threshold,
            frame_threshold=options.frame_threshold,
            min_note_length=options.min_note_length,
            energy_threshold=options.energy_threshold,
            melodia_trick=options.melodia_trick,
        )
        return extractor.extract(onsets, frames)

    def _to_notes(self, notes: List[InterNote]) -> List[Note]:
        if not notes:
            return []

        to_time = FrameTimeMapper(self.model_output.contours.shape[0])
        return [
            Note(
                start_time=to_time(n.start_frame),
                end_time=to_time(n.end_frame),
                pitch=n.pitch,
                amplitude=n.amplitude,
                pitch_bend=None if n.pitch_bend is None
                else tuple(float(b) for b in n.pitch_bend),
            )
            for n in notes
        ]
