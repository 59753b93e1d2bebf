"""VarInt encoding used by the Minecraft protocol.

Each byte carries 7 data bits, least significant group first. The high bit
is set while more bytes follow. Values are 32-bit and encoded through their
unsigned bit pattern, so negative numbers always take the full 5 bytes.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from mcping.errors import VarIntTooLong

SEGMENT_BITS = 0x7F
CONTINUE_BIT = 0x80
MAX_VARINT_BYTES = 5
MAX_EMPTY_READS = 5


def _to_signed(value: int) -> int:
    value &= 0xFFFFFFFF
    if value & (1 << 31):
        value -= 1 << 32
    return value


def encode_varint(value: int) -> bytes:
    """Encode a signed 32-bit integer as a VarInt."""
    if not -(1 << 31) <= value < (1 << 31):
        raise ValueError(f"{value} does not fit in a signed 32-bit integer")
    value &= 0xFFFFFFFF
    out = bytearray()
    while True:
        if value & ~SEGMENT_BITS == 0:
            out.append(value)
            return bytes(out)
        out.append((value & SEGMENT_BITS) | CONTINUE_BIT)
        value >>= 7


def decode_varint(data: bytes) -> tuple[int, int]:
    """Decode a VarInt from the start of `data`.

    Returns (value, bytes consumed).
    """
    result = 0
    for i, byte in enumerate(data[:MAX_VARINT_BYTES]):
        result |= (byte & SEGMENT_BITS) << (7 * i)
        if not byte & CONTINUE_BIT:
            return _to_signed(result), i + 1
    if len(data) < MAX_VARINT_BYTES:
        raise ValueError("Unexpected end of data while reading VarInt")
    raise VarIntTooLong()


async def read_varint(read: Callable[[int], Awaitable[bytes]]) -> int:
    """Read a VarInt one byte at a time from an async `read(n)` callable.

    A read that returns no bytes is retried; only `MAX_EMPTY_READS` of them in
    a row are tolerated before the stream is considered closed.
    """
    result = 0
    shift = 0
    empty_reads = 0
    while True:
        chunk = await read(1)
        if not chunk:
            empty_reads += 1
            if empty_reads >= MAX_EMPTY_READS:
                raise EOFError("stream closed while reading VarInt")
            continue
        empty_reads = 0
        byte = chunk[0]
        result |= (byte & SEGMENT_BITS) << shift
        if not byte & CONTINUE_BIT:
            return _to_signed(result)
        shift += 7
        if shift >= 7 * MAX_VARINT_BYTES:
            raise VarIntTooLong()
