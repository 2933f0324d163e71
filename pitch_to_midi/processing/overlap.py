"""Overlap resolution for single-channel pitch bends."""

from typing import List

from ..core import Note


def drop_overlapping_pitch_bends(notes: List[Note]) -> List[Note]:
    """
    Drop pitch bends from every note that overlaps another note in time.

    A pitch wheel acts on a whole MIDI channel, so bends of concurrent
    notes sharing a channel would interfere with each other.

    Args:
        notes: List of notes

    Returns:
        Notes sorted by ``Note.sort_key``, with overlapping bends removed
    """
    notes = sorted(notes, key=lambda n: n.sort_key)
    stripped = [False] * len(notes)

    for i in range(len(notes) - 1):
        for j in range(i + 1, len(notes)):
            # sorted by start, so no later note can overlap note i
            if notes[j].start_time >= notes[i].end_time:
                break
            stripped[i] = True
            stripped[j] = True

    return [
        note.without_pitch_bend() if strip and note.pitch_bend is not None else note
        for note, strip in zip(notes, stripped)
    ]
