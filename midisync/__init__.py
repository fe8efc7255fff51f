"""Extract note timing from Standard MIDI Files to drive slideshow frames."""

from .chunks import (  # noqa: F401
    DEFAULT_MAX_FILE_SIZE,
    HeaderChunk,
    SMPTEDivision,
    StandardMidiFile,
    TicksPerQuarterNote,
    TrackChunk,
    parse_midi_file,
    read_midi_file,
    resolve_track_length,
    scan_end_of_track_length,
)
from .errors import (  # noqa: F401
    ExcessTrailingBytes,
    InvalidMidiFile,
    MalformedInput,
    MidiError,
    MismatchedNoteKey,
    MultipleTempoEvents,
    OddNoteEventCount,
    OverlappingNote,
    UnsupportedDivision,
    UnsupportedFormat,
    UnterminatedNote,
)
from .events import (  # noqa: F401
    ChannelMessage,
    MetaEvent,
    MidiTrackEvent,
    NoteOff,
    NoteOn,
    SysExEvent,
    decode_track_events,
)
from .frames import FrameSpec, build_frame_schedule  # noqa: F401
from .notes import MidiNote, extract_notes, time_length  # noqa: F401
from .primitives import encode_vlq, read_u16_be, read_u32_be, read_vlq  # noqa: F401
from .timebase import get_timebase, get_timebase_exact  # noqa: F401
