"""Seconds-per-tick conversion from a file's tempo and division."""

from __future__ import annotations

from fractions import Fraction
from typing import List

from .chunks import StandardMidiFile, TicksPerQuarterNote
from .errors import MultipleTempoEvents, UnsupportedDivision
from .events import MetaEvent


DEFAULT_TEMPO_BPM = 120
SECONDS_PER_MINUTE = 60
MICROS_PER_SECOND = 1_000_000


def find_tempo_events(midi: StandardMidiFile) -> List[MetaEvent]:
    return [
        event
        for event in midi.iter_events()
        if isinstance(event, MetaEvent) and event.is_set_tempo
    ]


def get_timebase_exact(midi: StandardMidiFile) -> Fraction:
    """Return seconds per tick as an exact fraction.

    Only a constant tempo is supported: more than one Set Tempo event raises
    ``MultipleTempoEvents``.  Without any, 120 quarter notes per minute is
    assumed.  SMPTE division raises ``UnsupportedDivision``.
    """
    tempo_events = find_tempo_events(midi)
    if len(tempo_events) > 1:
        raise MultipleTempoEvents(
            f"only a constant tempo is supported; found {len(tempo_events)} tempo events "
            f"at ticks {[e.tick for e in tempo_events]}"
        )

    division = midi.header.division
    if not isinstance(division, TicksPerQuarterNote):
        raise UnsupportedDivision(
            f"only ticks-per-quarter-note division is supported, got {division}"
        )
    if division.ticks == 0:
        raise UnsupportedDivision("ticks per quarter note is 0")

    if not tempo_events:
        return Fraction(SECONDS_PER_MINUTE, DEFAULT_TEMPO_BPM * division.ticks)
    micros = tempo_events[0].micros_per_quarter_note
    return Fraction(micros, MICROS_PER_SECOND * division.ticks)


def get_timebase(midi: StandardMidiFile) -> float:
    """Return seconds per tick as a float (see ``get_timebase_exact``)."""
    return float(get_timebase_exact(midi))
