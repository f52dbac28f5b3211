"""
Filetable format for AKI N64 wrestling games.

Format:
    Data blob:
        Raw entry contents in list order. Each entry is padded with a
        single 0x00 byte when its length is odd, so every entry starts
        on an even offset.
    Index (4 bytes/entry + 4 bytes sentinel, big-endian):
        - Bits 31..1: Entry start offset
        - Bit 0: Compression (LZSS) flag
        Sentinel: Total data blob size, no flag bit.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from .errors import ConfigurationError

RECORD_SIZE = 4
FLAG_COMPRESSED = 0x01
MAX_OFFSET = 0xFFFFFFFF


def read_u32_be(data: Union[bytes, memoryview], offset: int) -> int:
    return int.from_bytes(data[offset : offset + 4], "big")


def padded_length(length: int) -> int:
    return length + (length % 2)


def encode_offset(offset: int, compressed: bool) -> bytes:
    """Pack an entry offset and its compression flag into one index record.

    The low offset bit is given over to the flag, so only even offsets can
    be stored. Odd offsets are rejected rather than silently truncated.
    """
    if offset < 0 or offset > MAX_OFFSET:
        raise ValueError(f"Offset 0x{offset:X} does not fit in an index record")
    if offset % 2 != 0:
        raise ValueError(f"Offset 0x{offset:X} is odd; entries must start on even offsets")

    record = bytearray(offset.to_bytes(RECORD_SIZE, "big"))
    record[3] = (offset & 0xFE) | (FLAG_COMPRESSED if compressed else 0)
    return bytes(record)


def decode_offset(record: Union[bytes, memoryview]) -> Tuple[int, bool]:
    if len(record) != RECORD_SIZE:
        raise ValueError(f"Index record must be {RECORD_SIZE} bytes, got {len(record)}")
    value = read_u32_be(record, 0)
    return value & ~FLAG_COMPRESSED, bool(value & FLAG_COMPRESSED)


def encode_sentinel(total_size: int) -> bytes:
    if total_size < 0 or total_size > MAX_OFFSET:
        raise ValueError(f"Filetable size 0x{total_size:X} does not fit in an index record")
    return total_size.to_bytes(RECORD_SIZE, "big")


def decode_sentinel(record: Union[bytes, memoryview]) -> int:
    if len(record) != RECORD_SIZE:
        raise ValueError(f"Index record must be {RECORD_SIZE} bytes, got {len(record)}")
    return read_u32_be(record, 0)


@dataclass(frozen=True)
class EntryDescriptor:
    """One filetable entry as listed in the build list."""

    source: Union[str, Path]
    compressed: bool = False
    symbol: Optional[str] = None
    export_size: bool = False
    size_padding: int = 0

    def validate(self) -> None:
        if self.size_padding < 0:
            raise ConfigurationError(
                f"'{self.source}': exportsizepad must not be negative ({self.size_padding})",
                self.source,
            )
        if self.symbol is None:
            if self.export_size:
                raise ConfigurationError(
                    f"'{self.source}': exportsize requires a symbol name to be defined",
                    self.source,
                )
            if self.size_padding > 0:
                raise ConfigurationError(
                    f"'{self.source}': exportsizepad requires a symbol name to be defined",
                    self.source,
                )


class Filetable:
    """Read-only view over a built data blob and its index."""

    def __init__(self, data: bytes, index: bytes):
        self._data = data
        self._offsets: List[int] = []
        self._flags: List[bool] = []
        self._parse(index)

    def _parse(self, index: bytes) -> None:
        view = memoryview(index)
        if len(view) < RECORD_SIZE or len(view) % RECORD_SIZE != 0:
            raise ValueError(f"Invalid index size ({len(view)} bytes)")

        num_entries = len(view) // RECORD_SIZE - 1
        for i in range(num_entries):
            offset, compressed = decode_offset(view[i * RECORD_SIZE : (i + 1) * RECORD_SIZE])
            self._offsets.append(offset)
            self._flags.append(compressed)

        total = decode_sentinel(view[num_entries * RECORD_SIZE :])
        if total != len(self._data):
            raise ValueError(
                f"Index sentinel (0x{total:X}) does not match data size (0x{len(self._data):X})"
            )

        previous = 0
        for i, offset in enumerate(self._offsets + [total]):
            if offset < previous:
                raise ValueError(f"Entry {i + 1} offset 0x{offset:X} is out of order")
            previous = offset

    @property
    def total_size(self) -> int:
        return len(self._data)

    def offset(self, idx: int) -> int:
        return self._offsets[idx]

    def is_compressed(self, idx: int) -> bool:
        return self._flags[idx]

    def end(self, idx: int) -> int:
        if idx + 1 < len(self._offsets):
            return self._offsets[idx + 1]
        return self.total_size

    def entry(self, idx: int) -> bytes:
        """Entry contents including its pad byte, if any."""
        if idx < 0:
            idx += len(self._offsets)
        return self._data[self._offsets[idx] : self.end(idx)]

    def __len__(self) -> int:
        return len(self._offsets)

    def __getitem__(self, idx: int) -> bytes:
        return self.entry(idx)

    def __iter__(self) -> Iterator[bytes]:
        return (self.entry(i) for i in range(len(self)))
