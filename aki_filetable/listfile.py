"""
JSON build list parsing.

The list is an array of objects:
    file           source path (required)
    lzss           entry is LZSS compressed (optional, default false)
    symbol         friendly name, exported as FILEID_<symbol> (optional)
    exportsize     also export FILESIZE_<symbol> (optional, default false)
    exportsizepad  constant added to the exported size (optional, default 0)
"""

import json
from pathlib import Path
from typing import Any, List, Optional

from .errors import ConfigurationError
from .model import EntryDescriptor


def _expect(element: dict, key: str, kind: type, default: Any, idx: int) -> Any:
    value = element.get(key)
    if value is None:
        return default

    # bool is an int subclass; keep true/false out of integer fields.
    if isinstance(value, kind) and not (kind is int and isinstance(value, bool)):
        return value
    raise ConfigurationError(
        f"List entry {idx}: '{key}' must be {kind.__name__}, got {type(value).__name__}"
    )


def parse_entry_list(document: Any, base_dir: Optional[Path] = None) -> List[EntryDescriptor]:
    if not isinstance(document, list):
        raise ConfigurationError("Build list must be a JSON array")

    entries = []
    for idx, element in enumerate(document):
        if not isinstance(element, dict):
            raise ConfigurationError(f"List entry {idx}: must be an object")

        file_name = _expect(element, "file", str, None, idx)
        if file_name is None:
            raise ConfigurationError(f"List entry {idx}: missing 'file'")
        source = Path(file_name)
        if base_dir is not None and not source.is_absolute():
            source = base_dir / source

        descriptor = EntryDescriptor(
            source=source,
            compressed=_expect(element, "lzss", bool, False, idx),
            symbol=_expect(element, "symbol", str, None, idx),
            export_size=_expect(element, "exportsize", bool, False, idx),
            size_padding=_expect(element, "exportsizepad", int, 0, idx),
        )
        entries.append(descriptor)

    return entries


def load_entry_list(path: Path, base_dir: Optional[Path] = None) -> List[EntryDescriptor]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Unable to read from input list file '{path}': {e}", path) from e

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in list file '{path}': {e}", path) from e

    return parse_entry_list(document, base_dir)
