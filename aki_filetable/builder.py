"""
Filetable builder - offset assignment, padding and index encoding.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import AllocationFailure
from .model import (
    EntryDescriptor,
    RECORD_SIZE,
    encode_offset,
    encode_sentinel,
    padded_length,
)
from .sizes import exported_size, resolve_logical_size


@dataclass(frozen=True)
class BuildState:
    """Running position of a build: next free offset and entries seen so far."""

    cursor: int = 0
    count: int = 0


@dataclass(frozen=True)
class BuiltEntry:
    ordinal: int
    descriptor: EntryDescriptor
    offset: int
    raw_length: int
    logical_size: int
    record: bytes

    @property
    def padded_length(self) -> int:
        return padded_length(self.raw_length)

    @property
    def exported_size(self) -> Optional[int]:
        if not self.descriptor.export_size:
            return None
        return exported_size(
            self.raw_length,
            self.logical_size,
            self.descriptor.compressed,
            self.descriptor.size_padding,
        )


@dataclass(frozen=True)
class SymbolEntry:
    name: str
    ordinal: int
    size: Optional[int] = None


def fold_entry(
    state: BuildState, descriptor: EntryDescriptor, data: bytes
) -> Tuple[BuildState, BuiltEntry]:
    """Place one entry at the current cursor and advance past it."""
    descriptor.validate()

    raw_length = len(data)
    logical_size = resolve_logical_size(data, descriptor.compressed, descriptor.source)

    entry = BuiltEntry(
        ordinal=state.count + 1,
        descriptor=descriptor,
        offset=state.cursor,
        raw_length=raw_length,
        logical_size=logical_size,
        record=encode_offset(state.cursor, descriptor.compressed),
    )
    next_state = BuildState(
        cursor=state.cursor + padded_length(raw_length),
        count=state.count + 1,
    )
    return next_state, entry


@dataclass(frozen=True)
class BuildResult:
    data: bytes
    entries: Tuple[BuiltEntry, ...]
    total_size: int

    @property
    def num_entries(self) -> int:
        return len(self.entries)

    @property
    def index_size(self) -> int:
        # Published as FILETABLE_INDEX_SIZE; the sentinel is not counted.
        return self.num_entries * RECORD_SIZE

    @property
    def records(self) -> List[bytes]:
        return [e.record for e in self.entries]

    @property
    def sentinel(self) -> bytes:
        return encode_sentinel(self.total_size)

    @property
    def index(self) -> bytes:
        return b"".join(self.records) + self.sentinel

    @property
    def symbols(self) -> List[SymbolEntry]:
        return [
            SymbolEntry(e.descriptor.symbol, e.ordinal, e.exported_size)
            for e in self.entries
            if e.descriptor.symbol is not None
        ]

    def symbol_ids(self) -> List[Tuple[str, int]]:
        return [(s.name, s.ordinal) for s in self.symbols]

    def exported_sizes(self) -> List[Tuple[str, int]]:
        return [(s.name, s.size) for s in self.symbols if s.size is not None]

    def symbol_table(self) -> Dict[str, SymbolEntry]:
        return {s.name: s for s in self.symbols}


class FiletableBuilder:
    """Single forward pass over the entry list.

    In header-only mode the data blob is not materialized, but offsets and
    records are computed exactly as in a full build.
    """

    def __init__(self, header_only: bool = False):
        self.header_only = header_only
        self._state = BuildState()
        self._entries: List[BuiltEntry] = []
        self._data = bytearray()

    @property
    def cursor(self) -> int:
        return self._state.cursor

    def add(self, descriptor: EntryDescriptor, data: bytes) -> BuiltEntry:
        next_state, entry = fold_entry(self._state, descriptor, data)

        if not self.header_only:
            try:
                self._data += data
                if len(data) % 2 != 0:
                    self._data.append(0)
            except MemoryError as e:
                raise AllocationFailure(
                    f"Unable to allocate memory for file '{descriptor.source}'.", descriptor.source
                ) from e

        self._state = next_state
        self._entries.append(entry)
        return entry

    def build(self, items: Iterable[Tuple[EntryDescriptor, bytes]]) -> BuildResult:
        for descriptor, data in items:
            self.add(descriptor, data)
        return self.finish()

    def finish(self) -> BuildResult:
        # Validates the total fits in the sentinel record.
        encode_sentinel(self._state.cursor)
        return BuildResult(
            data=bytes(self._data),
            entries=tuple(self._entries),
            total_size=self._state.cursor,
        )
