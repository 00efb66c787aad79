"""
OSM PBF Blob Codec
==================

A blob holds one block of file content, stored either verbatim or
zlib-compressed. Its protobuf schema is::

    message Blob {
        optional bytes raw = 1;          // No compression
        optional int32 raw_size = 2;     // Uncompressed size, required with zlib_data
        optional bytes zlib_data = 3;    // zlib-compressed content

        // Defined by the format but not handled here:
        optional bytes lzma_data = 4;
        optional bytes OBSOLETE_bzip2_data = 5;
        optional bytes lz4_data = 6;
        optional bytes zstd_data = 7;
    }

On the wire the content fields are independently optional. In memory a blob
wraps exactly one of `RawContent` or `ZlibContent`, so "both" and "neither"
cannot be represented. The decoder rejects them on the way in.

Decoding is bounded twice:

1. The serialized blob must fit in `BlobLimits.max_blob_size`.
2. `raw_size` must fit in `BlobLimits.max_raw_size` before any
   decompression starts, and the inflated output is capped at `raw_size`.

References:
-----------
- OSM PBF format: https://wiki.openstreetmap.org/wiki/PBF_Format
- fileformat.proto: https://github.com/openstreetmap/OSM-binary/blob/master/osmpbf/fileformat.proto
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .compression import zlib_compress, zlib_decompress
from .config import DEFAULT_COMPRESSION_LEVEL, DEFAULT_LIMITS, BlobLimits
from .exceptions import MalformedBlob, SizeExceeded, UnsupportedCompression
from .wire import (
    INT32_MAX,
    WIRE_TYPE_LENGTH_DELIMITED,
    WIRE_TYPE_VARINT,
    WireError,
    decode_int32,
    encode_bytes,
    encode_int32,
    iter_fields,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Field Numbers
# =============================================================================

FIELD_RAW = 1
FIELD_RAW_SIZE = 2
FIELD_ZLIB_DATA = 3

UNSUPPORTED_COMPRESSION_FIELDS: dict[int, str] = {
    4: "lzma_data",
    5: "OBSOLETE_bzip2_data",
    6: "lz4_data",
    7: "zstd_data",
}
"""Compressed-content fields the format defines but this codec does not decode."""

_BYTES_FIELDS = {FIELD_RAW: "raw", FIELD_ZLIB_DATA: "zlib_data"} | UNSUPPORTED_COMPRESSION_FIELDS


# =============================================================================
# Content Variants
# =============================================================================


@dataclass(frozen=True, slots=True)
class RawContent:
    """Content stored without compression."""

    data: bytes
    """The content, verbatim."""

    declared_size: int | None = None
    """
    The `raw_size` the producer wrote alongside `raw`, if any.

    Informational only unless `BlobLimits.strict_raw_size` is set.
    """

    def __post_init__(self) -> None:
        if self.declared_size is not None and not 0 <= self.declared_size <= INT32_MAX:
            raise ValueError(
                f"declared_size must be a non-negative int32, got {self.declared_size}"
            )


@dataclass(frozen=True, slots=True)
class ZlibContent:
    """Content stored as a zlib stream."""

    data: bytes
    """The zlib-compressed content."""

    raw_size: int
    """Length of the content after decompression."""

    def __post_init__(self) -> None:
        if not 0 <= self.raw_size <= INT32_MAX:
            raise ValueError(f"raw_size must be a non-negative int32, got {self.raw_size}")


Content = RawContent | ZlibContent


# =============================================================================
# Blob
# =============================================================================


@dataclass(frozen=True, slots=True)
class Blob:
    """A single block of PBF file content."""

    content: Content
    """How the content is stored: verbatim or zlib-compressed."""

    @classmethod
    def from_content(
        cls,
        content: bytes,
        compress: bool,
        *,
        level: int = DEFAULT_COMPRESSION_LEVEL,
    ) -> Blob:
        """
        Stage content for writing.

        Args:
            content: The bytes to store.
            compress: Store as `zlib_data` if true, as `raw` otherwise.
            level: zlib compression level.

        Raises:
            CompressionError: If the zlib backend fails.
        """
        content = bytes(content)
        if not compress:
            return cls(RawContent(content))
        return cls(ZlibContent(zlib_compress(content, level), raw_size=len(content)))

    @property
    def is_compressed(self) -> bool:
        """True if the content is stored as `zlib_data`."""
        return isinstance(self.content, ZlibContent)

    def encode(self, *, limits: BlobLimits = DEFAULT_LIMITS) -> bytes:
        """
        Serialize as protobuf.

        Fields are written in ascending field-number order, so equal blobs
        always serialize to identical bytes.

        Args:
            limits: Bounds the output must respect. A blob built in memory is
                held to the same limits `decode` applies, so nothing is
                written that a reader with those limits would reject.

        Raises:
            SizeExceeded: If `raw_size` or the serialized blob is above its limit.
        """
        result = bytearray()
        declared: int | None = None
        match self.content:
            case RawContent(data=data, declared_size=declared_size):
                declared = declared_size
                result.extend(encode_bytes(FIELD_RAW, data))
                if declared_size is not None:
                    result.extend(encode_int32(FIELD_RAW_SIZE, declared_size))
            case ZlibContent(data=data, raw_size=raw_size):
                declared = raw_size
                result.extend(encode_int32(FIELD_RAW_SIZE, raw_size))
                result.extend(encode_bytes(FIELD_ZLIB_DATA, data))
            case _:
                raise TypeError(f"Unknown blob content: {type(self.content).__name__}")

        if declared is not None and declared > limits.max_raw_size:
            raise SizeExceeded("raw_size", declared, limits.max_raw_size)
        if len(result) > limits.max_blob_size:
            raise SizeExceeded("serialized blob", len(result), limits.max_blob_size)

        return bytes(result)

    @classmethod
    def decode(cls, data: bytes, *, limits: BlobLimits = DEFAULT_LIMITS) -> Blob:
        """
        Parse and validate a serialized blob without decompressing it.

        Args:
            data: Protobuf-encoded blob.
            limits: Size bounds supplied by the caller.

        Returns:
            The blob, holding exactly one content variant.

        Raises:
            SizeExceeded: If the input or `raw_size` is above its limit.
            UnsupportedCompression: If the content uses lzma, bzip2, lz4 or zstd.
            MalformedBlob: On any other structural violation.
        """
        # Step 1: Bound the input before touching it.
        if len(data) > limits.max_blob_size:
            raise SizeExceeded("serialized blob", len(data), limits.max_blob_size)

        # Step 2: Collect fields.
        #
        # Repeated occurrences of a field keep the last value, as protobuf
        # does for optional scalars. Unknown fields are skipped.
        data = bytes(data)
        present: dict[int, bytes] = {}
        raw_size: int | None = None
        try:
            for field_num, wire_type, value in iter_fields(data):
                if field_num in _BYTES_FIELDS:
                    if wire_type != WIRE_TYPE_LENGTH_DELIMITED:
                        raise MalformedBlob(
                            f"Field {_BYTES_FIELDS[field_num]} has wire type {wire_type}, "
                            "expected length-delimited",
                            field=_BYTES_FIELDS[field_num],
                        )
                    assert isinstance(value, bytes)
                    present[field_num] = value
                elif field_num == FIELD_RAW_SIZE:
                    if wire_type != WIRE_TYPE_VARINT:
                        raise MalformedBlob(
                            f"Field raw_size has wire type {wire_type}, expected varint",
                            field="raw_size",
                        )
                    assert isinstance(value, int)
                    raw_size = decode_int32(value)
        except WireError as e:
            raise MalformedBlob(f"Invalid blob encoding: {e}") from e

        # Step 3: Exactly one content field.
        names = [_BYTES_FIELDS[num] for num in sorted(present)]
        if len(names) > 1:
            raise MalformedBlob(f"Blob has multiple content fields: {', '.join(names)}")
        if not names:
            raise MalformedBlob("Blob has no content field")

        # Step 4: Range-check raw_size, whichever content it accompanies.
        if raw_size is not None:
            if raw_size < 0:
                raise MalformedBlob(f"Negative raw_size: {raw_size}", field="raw_size")
            if raw_size > limits.max_raw_size:
                raise SizeExceeded("raw_size", raw_size, limits.max_raw_size)

        # Step 5: Build the variant.
        if FIELD_RAW in present:
            raw = present[FIELD_RAW]
            if limits.strict_raw_size and raw_size is not None and raw_size != len(raw):
                raise MalformedBlob(
                    f"raw_size {raw_size} does not match raw length {len(raw)}",
                    field="raw_size",
                )
            return cls(RawContent(raw, declared_size=raw_size))

        if FIELD_ZLIB_DATA in present:
            if raw_size is None:
                raise MalformedBlob("zlib_data present without raw_size", field="raw_size")
            return cls(ZlibContent(present[FIELD_ZLIB_DATA], raw_size=raw_size))

        (field_num,) = present
        raise UnsupportedCompression(UNSUPPORTED_COMPRESSION_FIELDS[field_num])

    def unpack(self, *, limits: BlobLimits = DEFAULT_LIMITS) -> bytes:
        """
        Return the stored content, decompressing it if needed.

        Args:
            limits: Size bounds. Re-checked here so blobs built in memory get
                the same protection as decoded ones.

        Raises:
            SizeExceeded: If `raw_size` is above `limits.max_raw_size`.
            DecompressionError: If the stream is corrupt or inflates to a
                length other than `raw_size`.
        """
        match self.content:
            case RawContent(data=data):
                return data
            case ZlibContent(data=data, raw_size=raw_size):
                if raw_size > limits.max_raw_size:
                    raise SizeExceeded("raw_size", raw_size, limits.max_raw_size)
                return zlib_decompress(data, raw_size)
            case _:
                raise TypeError(f"Unknown blob content: {type(self.content).__name__}")


# =============================================================================
# Byte-Level Entry Points
# =============================================================================


def encode_blob(
    content: bytes,
    compress: bool = True,
    *,
    limits: BlobLimits = DEFAULT_LIMITS,
    level: int = DEFAULT_COMPRESSION_LEVEL,
) -> bytes:
    """
    Encode content as a serialized blob.

    Args:
        content: Opaque content bytes.
        compress: zlib-compress into `zlib_data` if true, store as `raw` otherwise.
        limits: Bounds the output must respect, so readers will accept it.
        level: zlib compression level.

    Returns:
        Protobuf-encoded blob.

    Raises:
        SizeExceeded: If the content or the serialized blob is too large.
        CompressionError: If the zlib backend fails.
    """
    if len(content) > limits.max_raw_size:
        raise SizeExceeded("content", len(content), limits.max_raw_size)

    encoded = Blob.from_content(content, compress, level=level).encode(limits=limits)

    logger.debug(
        "Encoded blob: %d content bytes -> %d bytes (compressed=%s)",
        len(content),
        len(encoded),
        compress,
    )
    return encoded


def decode_blob(data: bytes, *, limits: BlobLimits = DEFAULT_LIMITS) -> bytes:
    """
    Decode a serialized blob and return its content.

    Args:
        data: Protobuf-encoded blob.
        limits: Size bounds supplied by the caller.

    Returns:
        The original content bytes.

    Raises:
        MalformedBlob: If the blob is structurally invalid.
        SizeExceeded: If the input or `raw_size` is above its limit.
        DecompressionError: If `zlib_data` is corrupt or mis-sized.
    """
    blob = Blob.decode(data, limits=limits)
    content = blob.unpack(limits=limits)
    logger.debug(
        "Decoded blob: %d bytes -> %d content bytes (compressed=%s)",
        len(data),
        len(content),
        blob.is_compressed,
    )
    return content
