"""
Filetable manager - Logic for building and reading filetables.
"""

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .builder import BuildResult, FiletableBuilder
from .emitters import render_header, render_include, render_linker
from .errors import AllocationFailure, SourceUnreadable
from .listfile import load_entry_list
from .model import EntryDescriptor, Filetable
from .sizes import format_size


DEFAULT_DATA_FILE = "filetable.bin"
DEFAULT_INDEX_FILE = "filetable_index.bin"
DEFAULT_HEADER_FILE = "filetable.h"
DEFAULT_LINKER_FILE = "filetable.ld"
DEFAULT_INCLUDE_FILE = "filetable.inc"


@dataclass(frozen=True)
class OutputPaths:
    data: Path = Path(DEFAULT_DATA_FILE)
    index: Path = Path(DEFAULT_INDEX_FILE)
    header: Path = Path(DEFAULT_HEADER_FILE)
    linker: Path = Path(DEFAULT_LINKER_FILE)
    include: Path = Path(DEFAULT_INCLUDE_FILE)


def read_source(descriptor: EntryDescriptor) -> bytes:
    try:
        return Path(descriptor.source).read_bytes()
    except MemoryError as e:
        raise AllocationFailure(
            f"Unable to allocate memory for file '{descriptor.source}'.", descriptor.source
        ) from e
    except OSError as e:
        raise SourceUnreadable(
            f"Unable to open file '{descriptor.source}': {e.strerror or e}", descriptor.source
        ) from e


def _write_staged(artifacts: List[Tuple[Path, bytes]]) -> None:
    """Write every artifact to a temporary sibling, then move them all into place."""
    staged: List[Tuple[Path, Path]] = []
    try:
        for path, payload in artifacts:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(path.suffix + ".tmp")
            tmp_path.write_bytes(payload)
            staged.append((tmp_path, path))
    except Exception:
        for tmp_path, _ in staged:
            tmp_path.unlink(missing_ok=True)
        raise

    moved = 0
    try:
        for tmp_path, path in staged:
            tmp_path.replace(path)
            moved += 1
    except Exception:
        for tmp_path, _ in staged[moved:]:
            tmp_path.unlink(missing_ok=True)
        raise


class FiletableManager:
    """Manages filetable builds and built filetables."""

    def __init__(self, verbose: bool = False, log: Callable[[str], None] = print):
        self.verbose = verbose
        self.log = log
        self.entries: List[EntryDescriptor] = []
        self.result: Optional[BuildResult] = None
        self.filetable: Optional[Filetable] = None
        self.header_only: bool = False
        # Checksum caching
        self._data_checksum: Optional[str] = None
        self._index_checksum: Optional[str] = None

    def load_list(self, path: Path, base_dir: Optional[Path] = None) -> int:
        self.entries = load_entry_list(path, base_dir)
        self.result = None
        self._invalidate_checksums()
        return len(self.entries)

    def set_entries(self, entries: List[EntryDescriptor]) -> int:
        self.entries = list(entries)
        self.result = None
        self._invalidate_checksums()
        return len(self.entries)

    def build(self, header_only: bool = False) -> BuildResult:
        self.result = None
        self.filetable = None
        self._invalidate_checksums()
        builder = FiletableBuilder(header_only=header_only)

        for entry in self.entries:
            data = read_source(entry)
            built = builder.add(entry, data)
            if self.verbose:
                self._log_entry(built.ordinal, entry, len(data), built.offset)

        self.result = builder.finish()
        self.header_only = header_only
        return self.result

    def _log_entry(self, ordinal: int, entry: EntryDescriptor, size: int, offset: int) -> None:
        self.log(f"Info for Entry 0x{ordinal:04X}")
        self.log(f"file = {entry.source}")
        self.log(f"lzss = {'true' if entry.compressed else 'false'}")
        if entry.symbol is not None:
            self.log(f"symbol = FILEID_{entry.symbol}")
        self.log(f"exportsize = {'true' if entry.export_size else 'false'}")
        if entry.size_padding > 0:
            self.log(f"exportsizepad = {entry.size_padding}")
        self.log(f"File size: {size} bytes ({format_size(size)})")
        self.log(f"Location: 0x{offset:X}")

    def save(self, outputs: OutputPaths = OutputPaths()) -> None:
        if self.result is None:
            raise RuntimeError("No filetable built")

        artifacts: List[Tuple[Path, bytes]] = []
        if not self.header_only:
            artifacts.append((outputs.data, self.result.data))
            artifacts.append((outputs.index, self.result.index))
        artifacts.append((outputs.header, render_header(self.result).encode("utf-8")))
        artifacts.append((outputs.linker, render_linker(self.result).encode("utf-8")))
        artifacts.append((outputs.include, render_include(self.result).encode("utf-8")))

        _write_staged(artifacts)

    def load_filetable(self, data_path: Path, index_path: Path) -> int:
        data = data_path.read_bytes()
        index = index_path.read_bytes()

        self.filetable = Filetable(data, index)
        self.result = None
        self._data_checksum = hashlib.md5(data).hexdigest()
        self._index_checksum = hashlib.md5(index).hexdigest()
        return len(self.filetable)

    def _require_filetable(self) -> Filetable:
        if self.filetable is None:
            raise RuntimeError("No filetable loaded")
        return self.filetable

    def get_entry_info(self, idx: int) -> Tuple[int, int, bool]:
        """Offset, stored size (including padding) and compression flag of an entry."""
        table = self._require_filetable()
        return table.offset(idx), table.end(idx) - table.offset(idx), table.is_compressed(idx)

    def export_entry(self, idx: int, path: Path) -> None:
        table = self._require_filetable()
        path.write_bytes(table.entry(idx))

    def export_all(self, directory: Path) -> int:
        table = self._require_filetable()

        for i, data in enumerate(table):
            ext = ".lzss" if table.is_compressed(i) else ".bin"
            (directory / f"entry_{i + 1:04X}{ext}").write_bytes(data)

        return len(table)

    def get_data_checksum(self) -> str:
        if self._data_checksum is None:
            if self.result is None or self.header_only:
                return "-"
            self._data_checksum = hashlib.md5(self.result.data).hexdigest()
        return self._data_checksum

    def get_index_checksum(self) -> str:
        if self._index_checksum is None:
            if self.result is None or self.header_only:
                return "-"
            self._index_checksum = hashlib.md5(self.result.index).hexdigest()
        return self._index_checksum

    def _invalidate_checksums(self):
        self._data_checksum = None
        self._index_checksum = None
