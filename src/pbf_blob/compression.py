"""
zlib compression dispatch for blob content.

Compression itself is delegated to the zlib library. This module adds the
parts the blob format needs on top of it:

- Errors from the backend become `CompressionError` / `DecompressionError`.
- Decompression is bounded by the declared size, so a small stream that
  inflates to gigabytes is stopped after `expected_size + 1` bytes.


WHY BOUNDED DECOMPRESSION?
--------------------------
A blob declares its uncompressed size in `raw_size`. Inflating first and
comparing afterwards would let a hostile file force an allocation of
arbitrary size. Asking zlib for at most one byte more than declared is
enough to tell "exact", "too short" and "too long" apart.
"""

from __future__ import annotations

import zlib

from .exceptions import CompressionError, DecompressionError


def zlib_compress(data: bytes, level: int) -> bytes:
    """
    Compress data into a zlib stream.

    Args:
        data: Content to compress.
        level: zlib level, -1 (library default) or 0-9.

    Returns:
        zlib-wrapped DEFLATE stream.

    Raises:
        CompressionError: If the level is invalid or the backend fails.
    """
    if not -1 <= level <= 9:
        raise CompressionError(f"Invalid zlib compression level: {level}")
    try:
        return zlib.compress(data, level)
    except (zlib.error, MemoryError) as e:
        raise CompressionError(f"zlib compression failed: {e}") from e


def zlib_decompress(data: bytes, expected_size: int) -> bytes:
    """
    Decompress a zlib stream whose output must be exactly `expected_size` bytes.

    Args:
        data: zlib stream.
        expected_size: Declared uncompressed length. Must be non-negative.

    Returns:
        The decompressed bytes, exactly `expected_size` long.

    Raises:
        DecompressionError: If the stream is corrupt, truncated, followed by
            trailing bytes, or does not inflate to `expected_size` bytes.
    """
    decompressor = zlib.decompressobj()

    # A max_length of 0 would mean "unbounded", so the +1 is also what keeps
    # an empty declared size bounded.
    try:
        output = decompressor.decompress(data, expected_size + 1)
    except zlib.error as e:
        raise DecompressionError(f"Corrupt zlib stream: {e}") from e

    if len(output) > expected_size:
        raise DecompressionError(
            f"Decompressed content exceeds declared raw_size of {expected_size} bytes",
            expected=expected_size,
        )

    if not decompressor.eof:
        raise DecompressionError(
            f"Truncated zlib stream: inflated {len(output)} of {expected_size} bytes",
            expected=expected_size,
            actual=len(output),
        )

    if decompressor.unused_data:
        raise DecompressionError(
            f"{len(decompressor.unused_data)} trailing bytes after zlib stream"
        )

    if len(output) != expected_size:
        raise DecompressionError(
            f"Length mismatch: declared raw_size {expected_size}, got {len(output)}",
            expected=expected_size,
            actual=len(output),
        )

    return output
