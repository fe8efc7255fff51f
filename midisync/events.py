"""Decode the event stream of one MTrk chunk.

A track payload is a sequence of ``<delta-time VLQ> <event>`` records.
Events come in three kinds:

  0x80-0xEF  channel messages (Note Off / Note On are typed, the rest raw)
  0xFF       meta events: type byte, 1-byte length, data
  0xF0/0xF7  system exclusive events: 1-byte length, data

A data byte (MSB clear) where a status byte is expected reuses the previous
status ("running status").  Decoding stops at the End-of-Track meta event
or at the end of the payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from .errors import MalformedInput
from .primitives import read_u24_be, read_vlq


NOTE_OFF = 0x8
NOTE_ON = 0x9
META_STATUS = 0xFF
SYSEX_STATUSES = frozenset({0xF0, 0xF7})

META_END_OF_TRACK = 0x2F
META_SET_TEMPO = 0x51

# Data-byte count for every channel status nibble.
CHANNEL_DATA_LENGTHS = {
    0x8: 2,  # Note Off
    0x9: 2,  # Note On
    0xA: 2,  # Polyphonic key pressure
    0xB: 2,  # Control change / channel mode
    0xC: 1,  # Program change
    0xD: 1,  # Channel pressure
    0xE: 2,  # Pitch bend
}


@dataclass(frozen=True)
class NoteOn:
    tick: int  # absolute ticks from the start of the track
    delta: int
    channel: int
    key: int
    velocity: int

    @property
    def data(self) -> bytes:
        return bytes([0x90 | self.channel, self.key, self.velocity])

    @property
    def is_release(self) -> bool:
        """Note On with velocity 0 acts as a Note Off."""
        return self.velocity == 0


@dataclass(frozen=True)
class NoteOff:
    tick: int
    delta: int
    channel: int
    key: int
    velocity: int

    @property
    def data(self) -> bytes:
        return bytes([0x80 | self.channel, self.key, self.velocity])


@dataclass(frozen=True)
class ChannelMessage:
    """Aftertouch, control change, program change, channel pressure, pitch bend."""

    tick: int
    delta: int
    status: int
    params: bytes

    @property
    def channel(self) -> int:
        return self.status & 0x0F

    @property
    def data(self) -> bytes:
        return bytes([self.status]) + self.params


@dataclass(frozen=True)
class MetaEvent:
    tick: int
    delta: int
    meta_type: int
    payload: bytes

    @property
    def data(self) -> bytes:
        return bytes([META_STATUS, self.meta_type, len(self.payload)]) + self.payload

    @property
    def is_end_of_track(self) -> bool:
        return self.meta_type == META_END_OF_TRACK

    @property
    def is_set_tempo(self) -> bool:
        return self.meta_type == META_SET_TEMPO and len(self.payload) == 3

    @property
    def micros_per_quarter_note(self) -> int:
        if not self.is_set_tempo:
            raise MalformedInput(
                f"meta event 0x{self.meta_type:02X} with {len(self.payload)} data bytes "
                "is not a Set Tempo event"
            )
        return read_u24_be(self.payload)


@dataclass(frozen=True)
class SysExEvent:
    tick: int
    delta: int
    status: int  # 0xF0 or 0xF7
    payload: bytes

    @property
    def data(self) -> bytes:
        return bytes([self.status, len(self.payload)]) + self.payload


MidiTrackEvent = Union[NoteOn, NoteOff, ChannelMessage, MetaEvent, SysExEvent]


def is_note_event(event: MidiTrackEvent) -> bool:
    return isinstance(event, (NoteOn, NoteOff))


def _take(payload: bytes, pos: int, count: int, what: str) -> bytes:
    end = pos + count
    if end > len(payload):
        raise MalformedInput(
            f"{what} at offset {pos} needs {count} bytes, only {len(payload) - pos} left"
        )
    return payload[pos:end]


def _data_byte(value: int, *, name: str, pos: int) -> int:
    if value & 0x80:
        raise MalformedInput(f"{name} byte 0x{value:02X} at offset {pos} has its MSB set")
    return value


def decode_track_events(payload: bytes) -> List[MidiTrackEvent]:
    """Parse a track payload (the bytes after the 8-byte MTrk header)."""

    events: List[MidiTrackEvent] = []
    pos = 0
    tick = 0
    last_status: Optional[int] = None

    while pos < len(payload):
        delta, consumed = read_vlq(payload, pos)
        pos += consumed
        tick += delta

        if pos >= len(payload):
            raise MalformedInput(f"delta-time at end of track (offset {pos}) has no event")

        if payload[pos] & 0x80:
            status = payload[pos]
            pos += 1
        elif last_status is None:
            raise MalformedInput(
                f"data byte 0x{payload[pos]:02X} at offset {pos} with no running status"
            )
        else:
            status = last_status
        last_status = status

        kind = status >> 4
        if kind in (NOTE_OFF, NOTE_ON):
            key_raw, vel_raw = _take(payload, pos, 2, "note event")
            key = _data_byte(key_raw, name="key", pos=pos)
            velocity = _data_byte(vel_raw, name="velocity", pos=pos + 1)
            pos += 2
            cls = NoteOn if kind == NOTE_ON else NoteOff
            events.append(
                cls(tick=tick, delta=delta, channel=status & 0x0F, key=key, velocity=velocity)
            )
        elif kind in CHANNEL_DATA_LENGTHS:
            count = CHANNEL_DATA_LENGTHS[kind]
            params = _take(payload, pos, count, f"channel message 0x{status:02X}")
            pos += count
            events.append(ChannelMessage(tick=tick, delta=delta, status=status, params=params))
        elif status == META_STATUS:
            meta_type, length = _take(payload, pos, 2, "meta event header")
            pos += 2
            data = _take(payload, pos, length, f"meta event 0x{meta_type:02X} data")
            pos += length
            meta = MetaEvent(tick=tick, delta=delta, meta_type=meta_type, payload=data)
            events.append(meta)
            if meta.is_end_of_track:
                break
        elif status in SYSEX_STATUSES:
            length = _take(payload, pos, 1, "sysex length")[0]
            pos += 1
            data = _take(payload, pos, length, "sysex data")
            pos += length
            events.append(SysExEvent(tick=tick, delta=delta, status=status, payload=data))
        else:
            raise MalformedInput(
                f"status byte 0x{status:02X} at offset {pos} is not a channel, "
                "meta or sysex status"
            )

    return events
