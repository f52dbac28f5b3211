"""
aki_filetable - Filetable builder for AKI Corporation's N64 wrestling games.
"""

from .builder import BuildResult, BuildState, BuiltEntry, FiletableBuilder, SymbolEntry, fold_entry
from .emitters import render_header, render_include, render_linker
from .errors import (
    AllocationFailure,
    ConfigurationError,
    FiletableError,
    MalformedCompressedHeader,
    SourceUnreadable,
)
from .listfile import load_entry_list, parse_entry_list
from .manager import FiletableManager, OutputPaths, read_source
from .model import EntryDescriptor, Filetable, decode_offset, encode_offset, padded_length
from .sizes import exported_size, format_size, resolve_logical_size

__version__ = "1.6.0"

__all__ = [
    "AllocationFailure",
    "BuildResult",
    "BuildState",
    "BuiltEntry",
    "ConfigurationError",
    "EntryDescriptor",
    "Filetable",
    "FiletableBuilder",
    "FiletableError",
    "FiletableManager",
    "MalformedCompressedHeader",
    "OutputPaths",
    "SourceUnreadable",
    "SymbolEntry",
    "decode_offset",
    "encode_offset",
    "exported_size",
    "fold_entry",
    "format_size",
    "load_entry_list",
    "padded_length",
    "parse_entry_list",
    "read_source",
    "render_header",
    "render_include",
    "render_linker",
    "resolve_logical_size",
]
