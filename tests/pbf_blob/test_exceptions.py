"""Tests for the blob codec exception hierarchy."""

from __future__ import annotations

import pytest

from pbf_blob.exceptions import (
    BlobError,
    CompressionError,
    DecompressionError,
    MalformedBlob,
    SizeExceeded,
    UnsupportedCompression,
)


@pytest.mark.parametrize(
    "exc_type",
    [MalformedBlob, SizeExceeded, UnsupportedCompression, DecompressionError, CompressionError],
)
def test_all_derive_from_blob_error(exc_type: type[Exception]) -> None:
    """A single except clause catches every codec failure."""
    assert issubclass(exc_type, BlobError)


def test_size_exceeded_attributes() -> None:
    """SizeExceeded reports what was measured against which limit."""
    exc = SizeExceeded("raw_size", 100, 50)
    assert (exc.what, exc.size, exc.limit) == ("raw_size", 100, 50)
    assert exc.message == "raw_size of 100 bytes exceeds maximum of 50 bytes"
    assert str(exc) == exc.message


def test_unsupported_compression_names_field() -> None:
    """The codec name doubles as the offending field."""
    exc = UnsupportedCompression("zstd_data")
    assert exc.codec == exc.field == "zstd_data"


def test_repr() -> None:
    """repr shows the class and message."""
    assert repr(CompressionError("boom")) == "CompressionError('boom')"
