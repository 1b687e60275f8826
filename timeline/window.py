# timeline/window.py
from bisect import bisect_left
from typing import Iterator, List, Sequence, Tuple
from notes.model import Note, pitch_range

class Timeline:
    """Read-only, time-sorted note table plus the per-frame window search.

    ``due()`` walks a cursor forward so each note fires at most once, even if
    it sits inside the arrival threshold for more than one frame.
    """
    def __init__(self, notes: Sequence[Note], view_seconds: float):
        self.notes: Tuple[Note, ...] = tuple(notes)
        self.starts: List[float] = [n.time for n in self.notes]
        self.view_seconds = view_seconds
        self.lowest, self.highest = pitch_range(self.notes)
        self._next_due = 0

    def __len__(self):
        return len(self.notes)

    def visible_range(self, now: float) -> range:
        i = bisect_left(self.starts, now)
        end = i
        horizon = now + self.view_seconds
        while end < len(self.notes) and self.notes[end].time < horizon:
            end += 1
        return range(i, end)

    def visible(self, now: float) -> List[Note]:
        return [self.notes[i] for i in self.visible_range(now)]

    def due(self, window: range, now: float, threshold: float) -> Iterator[Note]:
        """Notes in ``window`` arriving within ``threshold`` seconds, each once."""
        for i in window:
            if i < self._next_due:
                continue
            n = self.notes[i]
            if n.time - now >= threshold:
                break
            self._next_due = i + 1
            yield n
