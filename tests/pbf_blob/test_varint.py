"""Tests for varint encoding and decoding, using the values a blob carries."""

from __future__ import annotations

import pytest

from pbf_blob.config import MAX_BLOB_SIZE, MAX_RAW_SIZE
from pbf_blob.varint import VarintError, decode_varint, encode_varint
from pbf_blob.wire import INT32_MAX, INT32_MIN

_UINT64 = 1 << 64

# Each entry is (label, value, expected_encoded_bytes).
BLOB_VECTORS: list[tuple[str, int, bytes]] = [
    # Field tags: (field_number << 3) | wire_type
    ("raw tag", (1 << 3) | 2, b"\x0a"),
    ("raw_size tag", (2 << 3) | 0, b"\x10"),
    ("zlib_data tag", (3 << 3) | 2, b"\x1a"),
    # Lengths and sizes
    ("empty content", 0, b"\x00"),
    ("hello world length", 11, b"\x0b"),
    ("1 MiB raw_size", 1048576, b"\x80\x80\x40"),
    ("just under 16 MiB", MAX_BLOB_SIZE - 1, b"\xff\xff\xff\x07"),
    ("16 MiB blob bound", MAX_BLOB_SIZE, b"\x80\x80\x80\x08"),
    ("32 MiB raw_size bound", MAX_RAW_SIZE, b"\x80\x80\x80\x10"),
    # int32 raw_size values as protobuf writes them
    ("INT32_MAX", INT32_MAX, b"\xff\xff\xff\xff\x07"),
    ("-1 sign-extended", -1 % _UINT64, b"\xff" * 9 + b"\x01"),
    (
        "INT32_MIN sign-extended",
        INT32_MIN % _UINT64,
        b"\x80\x80\x80\x80\xf8\xff\xff\xff\xff\x01",
    ),
]

_IDS = [label for label, _, _ in BLOB_VECTORS]


class TestBlobVectors:
    """Encoding and decoding of values that occur in serialized blobs."""

    @pytest.mark.parametrize(("label", "value", "expected"), BLOB_VECTORS, ids=_IDS)
    def test_encode(self, label: str, value: int, expected: bytes) -> None:
        """encode_varint produces the bytes protobuf writes."""
        assert encode_varint(value) == expected

    @pytest.mark.parametrize(("label", "value", "data"), BLOB_VECTORS, ids=_IDS)
    def test_decode(self, label: str, value: int, data: bytes) -> None:
        """decode_varint reads the value and reports every byte consumed."""
        assert decode_varint(data) == (value, len(data))

    def test_sizes_within_bounds_fit_four_bytes(self) -> None:
        """Every length up to the 16 MiB bound encodes in at most 4 bytes."""
        assert len(encode_varint(MAX_BLOB_SIZE)) == 4
        assert len(encode_varint(MAX_RAW_SIZE)) == 4

    def test_negative_int32_takes_ten_bytes(self) -> None:
        """Sign extension makes every negative int32 the maximum length."""
        assert len(encode_varint(-5 % _UINT64)) == 10

    def test_decode_length_after_tag(self) -> None:
        """The length of a raw field is read from just past its tag."""
        data = b"\x0a\x0bhello world"
        assert decode_varint(data, offset=1) == (11, 1)


class TestEncodeErrors:
    """Values encode_varint refuses."""

    def test_negative_raises(self) -> None:
        """Signed values must be reduced modulo 2^64 by the caller."""
        with pytest.raises(ValueError, match="non-negative"):
            encode_varint(-1)

    def test_above_64_bits_raises(self) -> None:
        """Values that need more than 64 bits are rejected."""
        with pytest.raises(ValueError, match="64 bits"):
            encode_varint(_UINT64)


class TestDecodeErrors:
    """Buffers decode_varint refuses."""

    def test_truncated_length(self) -> None:
        """A blob cut off inside a length prefix is truncated."""
        with pytest.raises(VarintError, match="Truncated"):
            decode_varint(b"\x1a\x8e", offset=1)

    def test_empty_raises(self) -> None:
        """Reading past the end of the buffer is truncated."""
        with pytest.raises(VarintError, match="Truncated"):
            decode_varint(b"\x0a", offset=1)

    def test_too_long_raises(self) -> None:
        """More than 10 continuation bytes cannot be a 64-bit value."""
        with pytest.raises(VarintError, match="too long"):
            decode_varint(b"\x80" * 11)

    def test_tenth_byte_overflow_raises(self) -> None:
        """A tenth byte carrying more than the top bit overflows 64 bits."""
        with pytest.raises(VarintError, match="overflows"):
            decode_varint(b"\xff" * 9 + b"\x02")
