"""
Logical size utilities for filetable entries.
"""

from pathlib import Path
from typing import Optional, Union

from .errors import MalformedCompressedHeader

COMPRESSED_HEADER_SIZE = 4


def resolve_logical_size(
    data: bytes, compressed: bool, source: Optional[Union[str, Path]] = None
) -> int:
    """Size a consumer should treat as authoritative for an entry.

    Compressed entries carry their decompressed size as a big-endian u32 in
    their first four bytes. Plain entries are as large as their raw data.
    """
    if not compressed:
        return len(data)

    if len(data) < COMPRESSED_HEADER_SIZE:
        raise MalformedCompressedHeader(
            f"'{source}': compressed entry is {len(data)} bytes, "
            f"too short for its {COMPRESSED_HEADER_SIZE}-byte size header",
            source,
        )
    return int.from_bytes(data[0:COMPRESSED_HEADER_SIZE], "big")


def exported_size(
    raw_length: int, logical_size: int, compressed: bool, size_padding: int = 0
) -> int:
    if compressed:
        return logical_size + size_padding
    return raw_length + size_padding


def format_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.2f} MB"
