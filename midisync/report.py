"""Human-readable summaries of a parsed MIDI file."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import List

from .chunks import StandardMidiFile
from .events import MetaEvent, NoteOff, NoteOn, SysExEvent
from .notes import MidiNote, extract_notes, time_length
from .timebase import get_timebase


NOTE_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")


def key_name(key: int) -> str:
    """Return the scientific pitch name of a MIDI key (60 -> ``C4``)."""
    return f"{NOTE_NAMES[key % 12]}{key // 12 - 1}"


@dataclass(frozen=True)
class MidiSummary:
    format: int
    track_count: int
    size: int
    timebase: float
    note_count: int  # includes the terminal note
    usable_note_count: int
    shortest_ticks: int
    shortest_seconds: float
    longest_ticks: int
    longest_seconds: float
    runtime_seconds: float

    def to_dict(self) -> dict:
        return asdict(self)


def summarize(midi: StandardMidiFile) -> MidiSummary:
    timebase = get_timebase(midi)
    notes = extract_notes(midi)
    # The terminal note always exists, so min/max are defined.
    shortest = min(notes, key=lambda n: n.duration_ticks)
    longest = max(notes, key=lambda n: n.duration_ticks)
    return MidiSummary(
        format=midi.header.format,
        track_count=len(midi.tracks),
        size=midi.size,
        timebase=timebase,
        note_count=len(notes),
        usable_note_count=len(notes) - 1,
        shortest_ticks=shortest.duration_ticks,
        shortest_seconds=shortest.seconds(timebase),
        longest_ticks=longest.duration_ticks,
        longest_seconds=longest.seconds(timebase),
        runtime_seconds=time_length(notes, timebase),
    )


def _describe_event(event) -> str:
    if isinstance(event, (NoteOn, NoteOff)):
        name = type(event).__name__
        return (
            f"{name}(tick={event.tick}, channel={event.channel}, "
            f"key={event.key} [{key_name(event.key)}], velocity={event.velocity})"
        )
    if isinstance(event, MetaEvent):
        extra = ""
        if event.is_set_tempo:
            extra = f", tempo={event.micros_per_quarter_note}us/qn"
        return (
            f"MetaEvent(tick={event.tick}, type=0x{event.meta_type:02X}, "
            f"data={event.payload.hex()}{extra})"
        )
    if isinstance(event, SysExEvent):
        return f"SysExEvent(tick={event.tick}, status=0x{event.status:02X}, data={event.payload.hex()})"
    return f"ChannelMessage(tick={event.tick}, data={event.data.hex()})"


def describe(midi: StandardMidiFile) -> str:
    """Multi-line dump of the header, every track and every event."""

    header = midi.header
    lines: List[str] = [
        f"File Size: {midi.size} bytes",
        "HeaderChunk:",
        f"\tData: {header.to_bytes().hex()}",
        f"\tFile Format: {header.format}",
        f"\tNumber Of Tracks: {header.track_count}",
        f"\tDivision: {header.division}",
        "Sequence:",
    ]
    for idx, track in enumerate(midi.tracks):
        repaired = ""
        if track.length_was_repaired:
            repaired = f" (declared {track.declared_length})"
        lines.append(f"\tTrack #{idx}: {track.length} bytes{repaired}")
        for event in track.events:
            lines.append(f"\t\t{_describe_event(event)}")
    return "\n".join(lines)


def describe_notes(notes: List[MidiNote]) -> str:
    return "\n".join(
        f"{note.ticks_from_start:>8} {key_name(note.key):<4} vel={note.velocity:<3} dur={note.duration_ticks}"
        for note in notes
    )
