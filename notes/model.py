# notes/model.py
from typing import Iterable, NamedTuple, Tuple

class Note(NamedTuple):
    time: float     # seconds from song start
    pitch: int      # MIDI note number, 0..255

def pitch_range(notes: Iterable[Note]) -> Tuple[int, int]:
    """(lowest, highest) pitch over the whole timeline."""
    pitches = [n.pitch for n in notes]
    if not pitches:
        raise ValueError("pitch_range() of an empty note table")
    return min(pitches), max(pitches)
