"""Pair Note-On / Note-Off events into notes.

Only monophonic material is supported: after a Note-On the next note event
must close it (a Note-Off, or a Note-On with velocity 0, for the same key).

Format 1 files are flattened track after track; tracks are concatenated,
not merged by time, so note events spread over several tracks will not
line up with playback.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import List, Sequence, Union

from .chunks import SUPPORTED_FORMATS, StandardMidiFile
from .errors import (
    MismatchedNoteKey,
    OddNoteEventCount,
    OverlappingNote,
    UnsupportedFormat,
    UnterminatedNote,
)
from .events import NoteOff, NoteOn, is_note_event


TERMINAL_KEY = 0
TERMINAL_VELOCITY = 0


@dataclass(frozen=True)
class MidiNote:
    key: int  # MIDI note number 0-127
    velocity: int  # 0-127, from the opening Note-On
    duration_ticks: int
    ticks_from_start: int

    @property
    def end_tick(self) -> int:
        return self.ticks_from_start + self.duration_ticks

    def seconds(self, timebase: Union[float, Fraction]) -> float:
        return float(self.duration_ticks * timebase)


def extract_notes(midi: StandardMidiFile) -> List[MidiNote]:
    """Return the file's notes in order, plus a zero-length terminal note.

    The terminal note sits at the end tick of the last real note (tick 0
    when the file has no notes) and marks the end of the material.
    """
    if midi.header.format not in SUPPORTED_FORMATS:
        raise UnsupportedFormat(
            f"only format 0 and format 1 files can be read for notes, got format {midi.header.format}"
        )

    events = list(midi.iter_events())
    note_event_count = sum(1 for event in events if is_note_event(event))
    if note_event_count % 2:
        raise OddNoteEventCount(
            f"expected an even number of note events, found {note_event_count}"
        )

    notes: List[MidiNote] = []
    tick = 0
    idx = 0
    while idx < len(events):
        opening = events[idx]
        idx += 1
        tick += opening.delta
        if not isinstance(opening, NoteOn) or opening.is_release:
            continue

        start = tick
        while True:
            if idx >= len(events):
                raise UnterminatedNote(
                    f"note on key {opening.key} at tick {start} is never released"
                )
            closing = events[idx]
            idx += 1
            tick += closing.delta
            if isinstance(closing, NoteOn):
                if not closing.is_release:
                    raise OverlappingNote(
                        f"note on key {closing.key} at tick {tick} starts while key "
                        f"{opening.key} (from tick {start}) is still sounding"
                    )
                break
            if isinstance(closing, NoteOff):
                break

        if closing.key != opening.key:
            raise MismatchedNoteKey(
                f"note on key {opening.key} at tick {start} is closed by key "
                f"{closing.key} at tick {tick}"
            )
        notes.append(
            MidiNote(
                key=opening.key,
                velocity=opening.velocity,
                duration_ticks=tick - start,
                ticks_from_start=start,
            )
        )

    end = notes[-1].end_tick if notes else 0
    notes.append(
        MidiNote(
            key=TERMINAL_KEY,
            velocity=TERMINAL_VELOCITY,
            duration_ticks=0,
            ticks_from_start=end,
        )
    )
    return notes


def time_length(notes: Sequence[MidiNote], timebase: Union[float, Fraction]) -> float:
    """Total sounding time in seconds (gaps between notes are not counted)."""
    return float(sum(note.duration_ticks for note in notes) * timebase)
