from __future__ import annotations

import struct
from typing import Tuple

from .errors import MalformedInput


VLQ_MAX = 0x0FFF_FFFF
VLQ_MAX_BYTES = 4


def read_u16_be(data: bytes) -> int:
    if len(data) != 2:
        raise MalformedInput(f"u16 needs exactly 2 bytes, got {len(data)}")
    return struct.unpack(">H", data)[0]


def read_u32_be(data: bytes) -> int:
    if len(data) != 4:
        raise MalformedInput(f"u32 needs exactly 4 bytes, got {len(data)}")
    return struct.unpack(">I", data)[0]


def read_u24_be(data: bytes) -> int:
    """Return the 3-byte big-endian value used by Set Tempo meta events."""

    if len(data) != 3:
        raise MalformedInput(f"u24 needs exactly 3 bytes, got {len(data)}")
    return int.from_bytes(data, "big", signed=False)


def read_vlq(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """Decode a variable-length quantity starting at ``offset``.

    Returns ``(value, consumed)`` where ``consumed`` is 1-4.  Each byte
    carries 7 value bits; the MSB is set on every byte except the last.
    """
    if offset >= len(data):
        raise MalformedInput(f"no bytes left for a variable-length quantity at offset {offset}")

    value = 0
    for i in range(VLQ_MAX_BYTES):
        pos = offset + i
        if pos >= len(data):
            raise MalformedInput(
                f"variable-length quantity truncated at offset {pos} "
                f"(started at {offset})"
            )
        byte = data[pos]
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            return value, i + 1

    raise MalformedInput(
        f"variable-length quantity at offset {offset} is longer than {VLQ_MAX_BYTES} bytes: "
        f"{data[offset:offset + VLQ_MAX_BYTES].hex()}"
    )


def encode_vlq(value: int) -> bytes:
    if not (0 <= value <= VLQ_MAX):
        raise ValueError(f"variable-length quantity must be in [0, 0x{VLQ_MAX:08X}], got {value}")

    out = bytearray([value & 0x7F])
    value >>= 7
    while value:
        out.append(0x80 | (value & 0x7F))
        value >>= 7
    out.reverse()
    return bytes(out)
