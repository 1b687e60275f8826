# midi/parser.py
import mido
from typing import List
from notes.model import Note

def parse_midi_to_note_table(path: str) -> List[Note]:
    """Flatten a MIDI file to ``(onset seconds, pitch)`` pairs.

    Only note-on events with velocity > 0 count; note-offs and durations are
    dropped. Onsets are rounded to milliseconds.
    """
    mid = mido.MidiFile(path)
    tpb = mid.ticks_per_beat
    tempo = 500000  # default 120 bpm
    time_sec = 0.0
    notes: List[Note] = []

    for msg in mido.merge_tracks(mid.tracks):
        time_sec += mido.tick2second(msg.time, tpb, tempo)
        if msg.is_meta:
            if msg.type == 'set_tempo':
                tempo = msg.tempo
        elif msg.type == 'note_on' and msg.velocity > 0:
            notes.append(Note(round(time_sec, 3), msg.note))
    notes.sort(key=lambda n: (n.time, n.pitch))
    return notes
