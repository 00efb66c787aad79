"""
Size limits and codec settings for OSM PBF blobs.

The constants are format-level bounds. `BlobLimits` is what callers pass in:
the file-level reader knows how large each blob claims to be and may tighten
the bounds, but never loosen them past the format maximums.
"""

from typing import Final

from pydantic import BaseModel, ConfigDict, Field

MAX_BLOB_SIZE: Final = 16 * 1024 * 1024
"""Maximum size of a serialized blob (16 MiB), checked before parsing."""

MAX_RAW_SIZE: Final = 32 * 1024 * 1024
"""Maximum uncompressed content size (32 MiB), checked before decompressing."""

DEFAULT_COMPRESSION_LEVEL: Final = 6
"""zlib level used when writing. Fixed so that encoding is reproducible."""


class BlobLimits(BaseModel):
    """
    Caller-supplied bounds for decoding (and encoding) a single blob.

    Instances are strict and immutable, so a shared default can be passed
    across threads without copying.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    max_blob_size: int = Field(default=MAX_BLOB_SIZE, gt=0, le=MAX_BLOB_SIZE)
    """Largest serialized blob accepted."""

    max_raw_size: int = Field(default=MAX_RAW_SIZE, ge=0, le=MAX_RAW_SIZE)
    """Largest `raw_size` (post-decompression size) accepted."""

    strict_raw_size: bool = False
    """
    Require `raw_size` to match `len(raw)` on uncompressed blobs.

    Producers commonly leave `raw_size` unset, or set it loosely, for raw
    blobs, so it is informational unless this is enabled.
    """


DEFAULT_LIMITS: Final = BlobLimits()
"""The format-level bounds: 16 MiB serialized, 32 MiB uncompressed."""
