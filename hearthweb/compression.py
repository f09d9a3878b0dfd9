"""zlib compression helpers."""

from __future__ import annotations

import zlib
from typing import Union

COMPRESSION_LEVEL = zlib.Z_DEFAULT_COMPRESSION

BytesLike = Union[bytes, bytearray, memoryview]


class CompressionError(RuntimeError):
    """Raised when data cannot be compressed or decompressed."""


def compress(data: Union[BytesLike, str]) -> bytes:
    """Compress bytes, or UTF-8 encoded text, into a zlib stream."""
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    try:
        return zlib.compress(raw, COMPRESSION_LEVEL)
    except zlib.error as exc:
        raise CompressionError("Failed to compress data") from exc


def decompress(data: BytesLike) -> bytes:
    """Inflate a zlib stream; a truncated stream yields what could be recovered."""
    raw = bytes(data)
    if not raw:
        raise CompressionError("Failed to decompress data")
    inflater = zlib.decompressobj()
    try:
        return inflater.decompress(raw)
    except zlib.error as exc:
        raise CompressionError("Failed to decompress data") from exc


def decompress_to_string(data: BytesLike) -> str:
    """Inflate a zlib stream and decode it as UTF-8, keeping undecodable bytes."""
    return decompress(data).decode("utf-8", errors="surrogateescape")