"""OSM PBF blob codec.

A blob is one block of PBF file content, stored verbatim or zlib-compressed.

Usage::

    from pbf_blob import BlobLimits, decode_blob, encode_blob

    # Write side
    wire = encode_blob(block_bytes, compress=True)

    # Read side, with the bounds the file reader knows about
    block_bytes = decode_blob(wire, limits=BlobLimits(max_blob_size=header.datasize))
"""

from __future__ import annotations

from .blob import Blob, Content, RawContent, ZlibContent, decode_blob, encode_blob
from .config import (
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_LIMITS,
    MAX_BLOB_SIZE,
    MAX_RAW_SIZE,
    BlobLimits,
)
from .exceptions import (
    BlobError,
    CompressionError,
    DecompressionError,
    MalformedBlob,
    SizeExceeded,
    UnsupportedCompression,
)

__all__ = [
    # Codec
    "encode_blob",
    "decode_blob",
    # Entity
    "Blob",
    "Content",
    "RawContent",
    "ZlibContent",
    # Configuration
    "BlobLimits",
    "DEFAULT_LIMITS",
    "DEFAULT_COMPRESSION_LEVEL",
    "MAX_BLOB_SIZE",
    "MAX_RAW_SIZE",
    # Exceptions
    "BlobError",
    "MalformedBlob",
    "SizeExceeded",
    "UnsupportedCompression",
    "DecompressionError",
    "CompressionError",
]
