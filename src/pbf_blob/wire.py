"""
Protobuf Wire Format Reader/Writer
==================================

A tagged-field writer/reader pair operating directly on byte buffers.

Every protobuf field on the wire is a tag followed by a payload::

    [tag varint][payload]

    tag = (field_number << 3) | wire_type

The payload shape depends on the wire type:

- 0 (VARINT): a single varint
- 1 (I64): 8 fixed bytes
- 2 (LEN): a varint length, then that many bytes
- 5 (I32): 4 fixed bytes

Wire types 3 and 4 are the deprecated group delimiters. They never appear in
the OSM PBF schema and are rejected.

References:
-----------
- Protobuf encoding: https://protobuf.dev/programming-guides/encoding/
"""

from __future__ import annotations

from collections.abc import Iterator

from .varint import VarintError, decode_varint, encode_varint

# =============================================================================
# Protobuf Wire Type Constants
# =============================================================================

WIRE_TYPE_VARINT = 0
"""Varint wire type for int32, int64, uint32, uint64, sint32, sint64, bool, enum."""

WIRE_TYPE_FIXED64 = 1
"""64-bit fixed wire type for fixed64, sfixed64, double."""

WIRE_TYPE_LENGTH_DELIMITED = 2
"""Length-delimited wire type for string, bytes, embedded messages, packed repeated fields."""

WIRE_TYPE_FIXED32 = 5
"""32-bit fixed wire type for fixed32, sfixed32, float."""

_FIXED_WIDTHS = {WIRE_TYPE_FIXED64: 8, WIRE_TYPE_FIXED32: 4}

MAX_FIELD_NUMBER = (1 << 29) - 1
"""Largest field number protobuf allows."""

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1

_UINT64_MASK = (1 << 64) - 1


class WireError(Exception):
    """Raised when a buffer is not valid protobuf wire data."""


# =============================================================================
# Writer
# =============================================================================


def encode_tag(field_number: int, wire_type: int) -> bytes:
    """Encode a protobuf field tag."""
    if not 1 <= field_number <= MAX_FIELD_NUMBER:
        raise ValueError(f"Field number out of range: {field_number}")
    return encode_varint((field_number << 3) | wire_type)


def encode_bytes(field_number: int, value: bytes) -> bytes:
    """Encode a bytes field (length-delimited)."""
    return encode_tag(field_number, WIRE_TYPE_LENGTH_DELIMITED) + encode_varint(len(value)) + value


def encode_int32(field_number: int, value: int) -> bytes:
    """
    Encode an int32 field.

    Negative values are sign-extended to 64 bits, as protobuf requires,
    and so always occupy 10 bytes.
    """
    if not INT32_MIN <= value <= INT32_MAX:
        raise ValueError(f"Value does not fit in int32: {value}")
    return encode_tag(field_number, WIRE_TYPE_VARINT) + encode_varint(value & _UINT64_MASK)


# =============================================================================
# Reader
# =============================================================================


def _read_varint(data: bytes, pos: int) -> tuple[int, int]:
    """Decode varint returning (value, new_position)."""
    try:
        value, consumed = decode_varint(data, pos)
    except VarintError as e:
        raise WireError(f"Invalid varint at position {pos}: {e}") from e
    return value, pos + consumed


def decode_tag(data: bytes, pos: int) -> tuple[int, int, int]:
    """
    Decode a protobuf field tag.

    Returns:
        (field_number, wire_type, new_position) tuple.

    Raises:
        WireError: If the tag is truncated or names field number 0.
    """
    tag, new_pos = _read_varint(data, pos)
    field_number = tag >> 3
    if field_number == 0 or field_number > MAX_FIELD_NUMBER:
        raise WireError(f"Invalid field number {field_number} at position {pos}")
    return field_number, tag & 0x07, new_pos


def decode_int32(value: int) -> int:
    """
    Interpret a decoded varint as a protobuf int32.

    Negative int32 values arrive as 64-bit two's complement. Anything that
    does not land in the int32 range afterwards is rejected.

    Raises:
        WireError: If the value is outside the int32 range.
    """
    if value >= 1 << 63:
        value -= 1 << 64
    if not INT32_MIN <= value <= INT32_MAX:
        raise WireError(f"Value does not fit in int32: {value}")
    return value


def iter_fields(data: bytes) -> Iterator[tuple[int, int, int | bytes]]:
    """
    Walk every field of a serialized message in wire order.

    Yields:
        (field_number, wire_type, value) tuples. The value is an `int`
        for varint fields and `bytes` for every other wire type.

    Raises:
        WireError: On truncated fields, group wire types, or unknown wire types.
    """
    pos = 0
    end = len(data)

    while pos < end:
        field_number, wire_type, pos = decode_tag(data, pos)

        if wire_type == WIRE_TYPE_VARINT:
            value, pos = _read_varint(data, pos)
            yield field_number, wire_type, value

        elif wire_type == WIRE_TYPE_LENGTH_DELIMITED:
            length, pos = _read_varint(data, pos)
            if length > end - pos:
                raise WireError(
                    f"Field {field_number} at position {pos} declares {length} bytes "
                    f"but only {end - pos} remain"
                )
            yield field_number, wire_type, data[pos : pos + length]
            pos += length

        elif wire_type in _FIXED_WIDTHS:
            width = _FIXED_WIDTHS[wire_type]
            if width > end - pos:
                raise WireError(f"Truncated fixed-width field {field_number} at position {pos}")
            yield field_number, wire_type, data[pos : pos + width]
            pos += width

        else:
            raise WireError(f"Unsupported wire type {wire_type} for field {field_number}")
