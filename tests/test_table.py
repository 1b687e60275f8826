import json

import pytest

from notes.model import Note
from notes.table import NoteTableError, load_note_table, save_note_table, validate_notes

def write(tmp_path, obj):
    p = tmp_path / "notes.json"
    p.write_text(json.dumps(obj), encoding="utf-8")
    return str(p)

def test_load_valid_table(tmp_path):
    notes = load_note_table(write(tmp_path, [[0, 60], [0.5, 64], [0.5, 62], [1.25, 67]]))
    assert notes == [Note(0.0, 60), Note(0.5, 64), Note(0.5, 62), Note(1.25, 67)]
    assert isinstance(notes[0].time, float)

def test_missing_file(tmp_path):
    with pytest.raises(NoteTableError, match="not found"):
        load_note_table(str(tmp_path / "nope.json"))

def test_invalid_json(tmp_path):
    p = tmp_path / "bad.json"
    p.write_text("[[0, 60],", encoding="utf-8")
    with pytest.raises(NoteTableError, match="not valid JSON"):
        load_note_table(str(p))

@pytest.mark.parametrize("rows", [
    [],
    {"notes": []},
    [[0.0]],
    [[0.0, 60, 1]],
    [["0.0", 60]],
    [[0.0, 256]],
    [[0.0, -1]],
    [[0.0, 60.5]],
    [[True, 60]],
    [[1.0, 60], [0.5, 61]],
    [[0.0, 60], [float("nan"), 61]],
    [[5.0, 60], [float("nan"), 61], [1.0, 62]],
    [[0.0, 60], [float("inf"), 61]],
    [[float("-inf"), 60], [0.0, 61]],
])
def test_malformed_rows(rows):
    with pytest.raises(NoteTableError):
        validate_notes(rows)

def test_save_then_load(tmp_path):
    path = str(tmp_path / "out.json")
    save_note_table(path, [Note(0.12345, 60), Note(2.0, 72)])
    assert load_note_table(path) == [Note(0.123, 60), Note(2.0, 72)]

def test_nan_literal_in_file_is_rejected(tmp_path):
    p = tmp_path / "nan.json"
    p.write_text("[[5.0, 60], [NaN, 61], [1.0, 62]]", encoding="utf-8")
    with pytest.raises(NoteTableError, match="finite"):
        load_note_table(str(p))
