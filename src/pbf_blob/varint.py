"""
Base-128 varints as they appear inside a serialized blob.

A blob uses varints in three places::

    0x0a 0x0b "hello world"      field 1 (raw):       tag, then length
    0x10 0x80 0x80 0x40          field 2 (raw_size):  tag, then 1048576
    0x1a 0x8e 0x08 ...           field 3 (zlib_data): tag, then length 1038

Each byte carries seven payload bits, least significant group first. A set
high bit means another byte follows::

    1048576 = 0b1000000_0000000_0000000
           -> [0x80] [0x80] [0x40]
               more   more   last

Lengths and tags are small, so they rarely exceed 4 bytes: the 16 MiB
serialized-blob bound fits in 4. The worst case is a negative `raw_size`.
Protobuf sign-extends an int32 to 64 bits before encoding it, so -1 takes
the full 10 bytes and ends in 0x01.

References:
    Protocol Buffers encoding:
        https://protobuf.dev/programming-guides/encoding/#varints
"""

from __future__ import annotations

MAX_VARINT_BYTES = 10
"""Ten groups of seven bits cover the 64 bits of a sign-extended int32."""

_PAYLOAD_MASK = 0x7F
_CONTINUATION = 0x80


class VarintError(Exception):
    """Raised when a buffer does not hold a well-formed varint."""


def encode_varint(value: int) -> bytes:
    """
    Encode a non-negative integer as a varint.

    Args:
        value: Integer in the range 0 .. 2^64 - 1. Callers holding a signed
            value reduce it modulo 2^64 first.

    Returns:
        Between 1 and 10 bytes.

    Raises:
        ValueError: If value is negative or does not fit in 64 bits.
    """
    if value < 0:
        raise ValueError("Varint must be non-negative")
    if value.bit_length() > 64:
        raise ValueError("Varint must fit in 64 bits")

    shifts = range(0, max(value.bit_length(), 1), 7)
    groups = [(value >> shift) & _PAYLOAD_MASK for shift in shifts]
    return bytes(group | _CONTINUATION for group in groups[:-1]) + bytes([groups[-1]])


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """
    Decode the varint starting at `offset`.

    Args:
        data: Buffer holding the varint.
        offset: Position of its first byte.

    Returns:
        Tuple of (value, bytes_consumed).

    Raises:
        VarintError: If the buffer ends mid-varint, the varint runs past
            10 bytes, or the value needs more than 64 bits.
    """
    value = 0
    for index in range(MAX_VARINT_BYTES):
        pos = offset + index
        if pos >= len(data):
            raise VarintError("Truncated varint")

        byte = data[pos]
        value |= (byte & _PAYLOAD_MASK) << (7 * index)

        if not byte & _CONTINUATION:
            if value.bit_length() > 64:
                raise VarintError("Varint overflows 64 bits")
            return value, index + 1

    raise VarintError("Varint too long")
