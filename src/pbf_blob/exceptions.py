"""Exception hierarchy for the blob codec."""

from __future__ import annotations


class BlobError(Exception):
    """
    Base exception for all blob codec errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class MalformedBlob(BlobError):
    """
    Raised when a serialized blob violates the structure of the format.

    Covers unparseable fields, wrong wire types, and blobs carrying both
    or neither of the content fields.

    Attributes:
        field: Name of the offending field, when one can be identified.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class UnsupportedCompression(MalformedBlob):
    """
    Raised when a blob stores its content with a compression codec this library does not handle.

    Attributes:
        codec: Wire name of the compressed-content field (e.g. `lzma_data`).
    """

    def __init__(self, codec: str) -> None:
        self.codec = codec
        super().__init__(f"Unsupported blob compression: {codec}", field=codec)


class SizeExceeded(MalformedBlob):
    """
    Raised when a declared or actual size is above the configured maximum.

    Attributes:
        what: Which size was checked (e.g. "serialized blob", "raw_size").
        size: The offending size in bytes.
        limit: The maximum allowed size in bytes (inclusive).
    """

    def __init__(self, what: str, size: int, limit: int) -> None:
        self.what = what
        self.size = size
        self.limit = limit
        super().__init__(f"{what} of {size} bytes exceeds maximum of {limit} bytes")


class DecompressionError(BlobError):
    """
    Raised when compressed content cannot be restored.

    Either the compression backend rejects the stream as corrupt or
    truncated, or the restored length disagrees with the declared `raw_size`.

    Attributes:
        expected: Declared uncompressed length, for length mismatches.
        actual: Observed uncompressed length, for length mismatches.
    """

    def __init__(
        self,
        message: str,
        *,
        expected: int | None = None,
        actual: int | None = None,
    ) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class CompressionError(BlobError):
    """Raised when the compression backend fails while encoding a blob."""
