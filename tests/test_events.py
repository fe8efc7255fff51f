"""Tests for the track event decoder."""

from __future__ import annotations

import io
from pathlib import Path
import sys

import mido
import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from midisync.chunks import StandardMidiFile  # noqa: E402
from midisync.errors import MalformedInput  # noqa: E402
from midisync.events import (  # noqa: E402
    ChannelMessage,
    MetaEvent,
    NoteOff,
    NoteOn,
    SysExEvent,
    decode_track_events,
)


class TestChannelMessages:
    def test_note_on_and_off(self):
        events = decode_track_events(b"\x00\x93\x3C\x40\x64\x83\x3C\x20")
        assert events == [
            NoteOn(tick=0, delta=0, channel=3, key=60, velocity=64),
            NoteOff(tick=100, delta=100, channel=3, key=60, velocity=32),
        ]
        assert events[0].data == b"\x93\x3C\x40"
        assert events[1].data == b"\x83\x3C\x20"

    def test_untyped_channel_messages(self):
        payload = (
            b"\x00\xC0\x05"  # program change
            b"\x00\xB0\x07\x64"  # control change
            b"\x00\xE0\x00\x40"  # pitch bend
            b"\x00\xD0\x10"  # channel pressure
            b"\x00\xA0\x3C\x10"  # poly aftertouch
        )
        events = decode_track_events(payload)
        assert all(isinstance(e, ChannelMessage) for e in events)
        assert [e.data for e in events] == [
            b"\xC0\x05",
            b"\xB0\x07\x64",
            b"\xE0\x00\x40",
            b"\xD0\x10",
            b"\xA0\x3C\x10",
        ]
        assert events[0].channel == 0

    def test_running_status(self):
        # One status byte, then data-only events reuse it.
        payload = b"\x00\x90\x3C\x40\x64\x3C\x00\x00\x3E\x40\x64\x3E\x00"
        events = decode_track_events(payload)
        assert [(type(e), e.tick, e.key, e.velocity) for e in events] == [
            (NoteOn, 0, 60, 64),
            (NoteOn, 100, 60, 0),
            (NoteOn, 100, 62, 64),
            (NoteOn, 200, 62, 0),
        ]
        assert events[1].is_release

    def test_running_status_on_program_change(self):
        events = decode_track_events(b"\x00\xC1\x05\x10\x06")
        assert [e.data for e in events] == [b"\xC1\x05", b"\xC1\x06"]
        assert events[1].tick == 16

    def test_data_byte_without_running_status(self):
        with pytest.raises(MalformedInput, match="no running status"):
            decode_track_events(b"\x00\x3C\x40")

    @pytest.mark.parametrize("payload", [b"\x00\x90\x80\x40", b"\x00\x80\x3C\xFF"])
    def test_note_data_byte_out_of_range(self, payload):
        with pytest.raises(MalformedInput, match="MSB set"):
            decode_track_events(payload)

    def test_truncated_note(self):
        with pytest.raises(MalformedInput, match="note event"):
            decode_track_events(b"\x00\x90\x3C")


class TestMetaAndSysEx:
    def test_set_tempo(self):
        (event,) = decode_track_events(b"\x00\xFF\x51\x03\x06\x8A\x1B")
        assert isinstance(event, MetaEvent)
        assert event.is_set_tempo
        assert event.micros_per_quarter_note == 428_571
        assert event.data == b"\xFF\x51\x03\x06\x8A\x1B"

    def test_non_tempo_meta_has_no_tempo(self):
        (event,) = decode_track_events(b"\x00\xFF\x01\x02hi")
        assert event.payload == b"hi"
        assert not event.is_set_tempo
        with pytest.raises(MalformedInput):
            event.micros_per_quarter_note

    def test_end_of_track_stops_decoding(self):
        events = decode_track_events(b"\x00\xFF\x2F\x00\x00\x90\x3C\x40")
        assert len(events) == 1
        assert events[0].is_end_of_track

    def test_sysex(self):
        events = decode_track_events(b"\x00\xF0\x03\x7E\x7F\xF7\x0A\xF7\x00")
        assert events == [
            SysExEvent(tick=0, delta=0, status=0xF0, payload=b"\x7E\x7F\xF7"),
            SysExEvent(tick=10, delta=10, status=0xF7, payload=b""),
        ]

    def test_truncated_meta_data(self):
        with pytest.raises(MalformedInput, match="meta event 0x01 data"):
            decode_track_events(b"\x00\xFF\x01\x05ab")

    @pytest.mark.parametrize("status", [0xF1, 0xF2, 0xF8, 0xFE])
    def test_unknown_system_status(self, status):
        with pytest.raises(MalformedInput, match="not a channel, meta or sysex"):
            decode_track_events(bytes([0x00, status, 0x00]))


class TestTicks:
    def test_multi_byte_delta(self):
        events = decode_track_events(b"\x81\x00\x90\x3C\x40\x83\x60\x80\x3C\x40")
        assert [e.tick for e in events] == [128, 128 + 480]
        assert [e.delta for e in events] == [128, 480]

    def test_delta_without_event(self):
        with pytest.raises(MalformedInput, match="has no event"):
            decode_track_events(b"\x00\x90\x3C\x40\x10")

    def test_ticks_are_non_decreasing(self):
        payload = b"\x00\x90\x3C\x40\x00\x80\x3C\x40\x05\xB0\x01\x02\x00\xFF\x2F\x00"
        ticks = [e.tick for e in decode_track_events(payload)]
        assert ticks == sorted(ticks) == [0, 0, 5, 5]


def test_decoder_matches_mido():
    """Decode a mido-written track (running status included) and compare."""
    track = mido.MidiTrack(
        [
            mido.MetaMessage("track_name", name="lead", time=0),
            mido.Message("program_change", channel=2, program=40, time=0),
            mido.Message("control_change", channel=2, control=7, value=100, time=0),
            mido.Message("note_on", channel=2, note=60, velocity=80, time=10),
            mido.Message("note_on", channel=2, note=60, velocity=0, time=200),
            mido.Message("note_on", channel=2, note=64, velocity=70, time=0),
            mido.Message("pitchwheel", channel=2, pitch=1000, time=30),
            mido.Message("note_off", channel=2, note=64, velocity=0, time=170),
            mido.Message("sysex", data=[0x7E, 0x7F, 0x09, 0x01], time=5),
            mido.Message("aftertouch", channel=2, value=33, time=1000),
        ]
    )
    mid = mido.MidiFile(type=0, ticks_per_beat=480)
    mid.tracks.append(track)
    buf = io.BytesIO()
    mid.save(file=buf)
    data = buf.getvalue()

    ours = StandardMidiFile.from_bytes(data).tracks[0].events
    theirs = mido.MidiFile(file=io.BytesIO(data)).tracks[0]
    assert len(ours) == len(theirs)

    tick = 0
    for event, msg in zip(ours, theirs):
        tick += msg.time
        assert event.tick == tick
        if msg.is_meta:
            assert isinstance(event, MetaEvent)
            assert event.meta_type == msg.bytes()[1]
        elif msg.type == "sysex":
            assert isinstance(event, SysExEvent)
            assert event.payload == bytes(msg.data) + b"\xF7"
        else:
            assert event.data == bytes(msg.bytes())
