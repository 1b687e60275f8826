# ========================= notes/table.py =========================
import json, logging, math
from typing import List, Sequence
from notes.model import Note

class NoteTableError(ValueError):
    """Note table is missing, malformed or out of order."""

def validate_notes(rows) -> List[Note]:
    """Turn ``[[time, pitch], ...]`` into Notes, rejecting anything the
    visible-window search cannot handle (unsorted times, bad pitches)."""
    if not isinstance(rows, list) or not rows:
        raise NoteTableError("Note table must be a non-empty list of [time, pitch] pairs")
    notes: List[Note] = []
    prev = float("-inf")
    for i, row in enumerate(rows):
        if not isinstance(row, (list, tuple)) or len(row) != 2:
            raise NoteTableError(f"Row {i}: expected [time, pitch], got {row!r}")
        t, p = row
        if isinstance(t, bool) or not isinstance(t, (int, float)):
            raise NoteTableError(f"Row {i}: time must be a number, got {t!r}")
        if not math.isfinite(t):
            raise NoteTableError(f"Row {i}: time must be finite, got {t!r}")
        if isinstance(p, bool) or not isinstance(p, int) or not 0 <= p <= 255:
            raise NoteTableError(f"Row {i}: pitch must be an integer 0..255, got {p!r}")
        if t < prev:
            raise NoteTableError(f"Row {i}: time {t} is earlier than previous {prev}")
        prev = t
        notes.append(Note(float(t), p))
    return notes

def load_note_table(path: str) -> List[Note]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            rows = json.load(f)
    except FileNotFoundError as e:
        raise NoteTableError(f"Note table not found: {path}") from e
    except json.JSONDecodeError as e:
        raise NoteTableError(f"Note table {path} is not valid JSON: {e}") from e
    notes = validate_notes(rows)
    logging.info("Loaded %d notes from %s", len(notes), path)
    return notes

def save_note_table(path: str, notes: Sequence[Note]):
    with open(path, "w", encoding="utf-8") as f:
        json.dump([[round(n.time, 3), n.pitch] for n in notes], f)
    logging.info("Wrote %d notes to %s", len(notes), path)
