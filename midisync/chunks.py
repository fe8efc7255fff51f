"""Chunk-level structure of a Standard MIDI File.

A file is one 14-byte ``MThd`` header chunk followed by ``MTrk`` track
chunks, each an 8-byte sub-header (magic + u32 BE length) and a payload.

Real-world files sometimes lie about a track's length or omit the
End-of-Track event, so the length used for slicing is resolved from both
the declared value and a scan for the ``FF 2F 00`` marker (see
``resolve_track_length``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from os import PathLike
from typing import BinaryIO, Iterator, Optional, Tuple, Union

from .errors import ExcessTrailingBytes, InvalidMidiFile, UnsupportedFormat
from .events import MidiTrackEvent, decode_track_events
from .primitives import read_u16_be, read_u32_be


MTHD_MAGIC = b"MThd"
MTRK_MAGIC = b"MTrk"
HEADER_CHUNK_SIZE = 14
HEADER_BODY_LENGTH = 6
TRACK_HEADER_SIZE = 8
END_OF_TRACK_MARKER = b"\xFF\x2F"
SUPPORTED_FORMATS = frozenset({0, 1})
SMPTE_FORMATS = frozenset({-24, -25, -29, -30})
DEFAULT_MAX_FILE_SIZE = 64 * 1024 * 1024


@dataclass(frozen=True)
class TicksPerQuarterNote:
    ticks: int

    def to_bytes(self) -> bytes:
        return self.ticks.to_bytes(2, "big")


@dataclass(frozen=True)
class SMPTEDivision:
    frames: int  # negative SMPTE format: -24, -25, -29 or -30
    ticks_per_frame: int

    def to_bytes(self) -> bytes:
        return bytes([self.frames & 0xFF, self.ticks_per_frame])


Division = Union[TicksPerQuarterNote, SMPTEDivision]


def parse_division(data: bytes) -> Division:
    word = read_u16_be(data)
    if not word & 0x8000:
        return TicksPerQuarterNote(ticks=word)

    frames = data[0] - 0x100  # high byte is a two's-complement negative number
    if frames not in SMPTE_FORMATS:
        raise InvalidMidiFile(
            f"SMPTE format {frames} is not one of {sorted(SMPTE_FORMATS)}"
        )
    return SMPTEDivision(frames=frames, ticks_per_frame=data[1])


@dataclass(frozen=True)
class HeaderChunk:
    format: int
    track_count: int
    division: Division

    @classmethod
    def from_bytes(cls, data: bytes) -> "HeaderChunk":
        if len(data) != HEADER_CHUNK_SIZE:
            raise InvalidMidiFile(
                f"header chunk must be {HEADER_CHUNK_SIZE} bytes, got {len(data)}"
            )
        if data[:4] != MTHD_MAGIC:
            raise InvalidMidiFile(f"bad header magic: {data[:4]!r} (expected {MTHD_MAGIC!r})")
        length = read_u32_be(data[4:8])
        if length != HEADER_BODY_LENGTH:
            raise InvalidMidiFile(
                f"header chunk length must be {HEADER_BODY_LENGTH}, got {length}"
            )
        return cls(
            format=read_u16_be(data[8:10]),
            track_count=read_u16_be(data[10:12]),
            division=parse_division(data[12:14]),
        )

    def to_bytes(self) -> bytes:
        return (
            MTHD_MAGIC
            + HEADER_BODY_LENGTH.to_bytes(4, "big")
            + self.format.to_bytes(2, "big")
            + self.track_count.to_bytes(2, "big")
            + self.division.to_bytes()
        )


@dataclass(frozen=True)
class TrackChunk:
    """One MTrk chunk with its payload already decoded into events."""

    payload: bytes
    declared_length: int
    events: Tuple[MidiTrackEvent, ...] = field(repr=False)

    def __post_init__(self) -> None:
        if not self.payload:
            raise InvalidMidiFile("a track chunk needs at least one event; length is 0")

    @classmethod
    def from_payload(cls, payload: bytes, *, declared_length: Optional[int] = None) -> "TrackChunk":
        return cls(
            payload=payload,
            declared_length=len(payload) if declared_length is None else declared_length,
            events=tuple(decode_track_events(payload)),
        )

    @property
    def length(self) -> int:
        """Resolved payload length; ``length + 8`` is the chunk's byte size."""
        return len(self.payload)

    @property
    def length_was_repaired(self) -> bool:
        return self.declared_length != self.length

    def to_bytes(self) -> bytes:
        return MTRK_MAGIC + self.length.to_bytes(4, "big") + self.payload


@dataclass(frozen=True)
class StandardMidiFile:
    header: HeaderChunk
    tracks: Tuple[TrackChunk, ...]

    @classmethod
    def from_bytes(cls, data: bytes, *, max_size: int = DEFAULT_MAX_FILE_SIZE) -> "StandardMidiFile":
        if len(data) > max_size:
            raise InvalidMidiFile(f"file is {len(data)} bytes; maximum is {max_size}")
        header = HeaderChunk.from_bytes(data[:HEADER_CHUNK_SIZE])
        _check_format(header)
        return cls(header=header, tracks=tuple(iter_track_chunks(data[HEADER_CHUNK_SIZE:])))

    @property
    def size(self) -> int:
        return HEADER_CHUNK_SIZE + sum(TRACK_HEADER_SIZE + t.length for t in self.tracks)

    def iter_events(self) -> Iterator[MidiTrackEvent]:
        """Yield every event, track after track (tracks are not time-merged)."""
        for track in self.tracks:
            yield from track.events

    def to_bytes(self) -> bytes:
        parts = [self.header.to_bytes()]
        for track in self.tracks:
            parts.append(track.to_bytes())
        return b"".join(parts)


def _check_format(header: HeaderChunk) -> None:
    if header.format not in SUPPORTED_FORMATS:
        raise UnsupportedFormat(
            f"only format 0 and format 1 files are supported, got format {header.format}"
        )


def scan_end_of_track_length(data: bytes, start: int = 0) -> Optional[int]:
    """Return the byte count from ``start`` through the first ``FF 2F 00``.

    Returns None when no End-of-Track marker exists after ``start``.
    """
    idx = data.find(END_OF_TRACK_MARKER, start)
    if idx == -1:
        return None
    length_pos = idx + len(END_OF_TRACK_MARKER)
    if length_pos >= len(data) or data[length_pos] != 0x00:
        raise InvalidMidiFile(
            f"End-of-Track event at offset {idx} does not have a length of 0"
        )
    return length_pos + 1 - start


def resolve_track_length(declared: int, scanned: Optional[int]) -> int:
    """Pick the payload length of a track chunk.

    Declared length when the End-of-Track scan agrees with it, otherwise the
    scanned length if a marker was found, otherwise the declared length.
    """
    if scanned is not None and scanned == declared:
        return declared
    if scanned is not None:
        return scanned
    return declared


def read_track_chunk(data: bytes, offset: int) -> TrackChunk:
    """Read the track chunk whose sub-header starts at ``offset``."""

    if len(data) - offset < TRACK_HEADER_SIZE:
        raise InvalidMidiFile(
            f"track chunk at offset {offset} needs {TRACK_HEADER_SIZE} header bytes, "
            f"only {len(data) - offset} left"
        )
    magic = data[offset : offset + 4]
    if magic != MTRK_MAGIC:
        raise InvalidMidiFile(
            f"bad track magic at offset {offset}: {magic!r} (expected {MTRK_MAGIC!r})"
        )
    declared = read_u32_be(data[offset + 4 : offset + 8])
    start = offset + TRACK_HEADER_SIZE

    length = resolve_track_length(declared, scan_end_of_track_length(data, start))
    if length == 0:
        raise InvalidMidiFile(f"track chunk at offset {offset} has length 0")
    if start + length > len(data):
        raise InvalidMidiFile(
            f"track chunk at offset {offset} claims {length} bytes, "
            f"only {len(data) - start} left"
        )
    return TrackChunk.from_payload(data[start : start + length], declared_length=declared)


def iter_track_chunks(data: bytes) -> Iterator[TrackChunk]:
    """Split everything after the header chunk into track chunks."""

    offset = 0
    while len(data) - offset >= TRACK_HEADER_SIZE:
        track = read_track_chunk(data, offset)
        yield track
        offset += TRACK_HEADER_SIZE + track.length

    remaining = len(data) - offset
    if remaining:
        raise ExcessTrailingBytes(
            f"{remaining} trailing bytes after the last track chunk (offset {offset})"
        )


def parse_midi_file(stream: BinaryIO, *, max_size: int = DEFAULT_MAX_FILE_SIZE) -> StandardMidiFile:
    """Read a whole Standard MIDI File from a binary stream."""

    header_bytes = stream.read(HEADER_CHUNK_SIZE)
    header = HeaderChunk.from_bytes(header_bytes)
    _check_format(header)

    budget = max(max_size - HEADER_CHUNK_SIZE, 0)
    body = stream.read(budget + 1)
    if len(body) > budget:
        raise InvalidMidiFile(f"file exceeds the maximum size of {max_size} bytes")

    return StandardMidiFile(header=header, tracks=tuple(iter_track_chunks(body)))


def read_midi_file(
    path: Union[str, PathLike], *, max_size: int = DEFAULT_MAX_FILE_SIZE
) -> StandardMidiFile:
    with open(path, "rb") as fh:
        return parse_midi_file(fh, max_size=max_size)
