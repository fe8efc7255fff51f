"""Error taxonomy for Standard MIDI File parsing and note extraction.

Every error is a ``ValueError`` so callers that only care about "bad input"
can catch that; the subclasses exist for callers that need to tell the
failure modes apart.
"""

from __future__ import annotations


class MidiError(ValueError):
    """Base class for every parse/extract failure."""


class MalformedInput(MidiError):
    """Structurally invalid bytes at the primitive or event level."""


class InvalidMidiFile(MidiError):
    """Wrong magic, wrong header size, or an unresolvable track length."""


class UnsupportedFormat(InvalidMidiFile):
    """Header format is not 0 or 1."""


class ExcessTrailingBytes(InvalidMidiFile):
    """Data left after the last resolvable track chunk."""


class UnsupportedDivision(MidiError):
    """SMPTE time division where ticks-per-quarter-note is required."""


class MultipleTempoEvents(MidiError):
    """More than one Set Tempo meta event; only constant tempo is supported."""


class OddNoteEventCount(MidiError):
    """Note-On + Note-Off events do not pair up."""


class UnterminatedNote(OddNoteEventCount):
    """A Note-On reached the end of the event stream without a closing event."""


class MismatchedNoteKey(MidiError):
    """A closing note event targets a different key than the open note."""


class OverlappingNote(MidiError):
    """A sounding Note-On arrived before the open note was closed."""
