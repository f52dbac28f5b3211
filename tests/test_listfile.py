"""Tests for JSON build list parsing."""

import json
from pathlib import Path

import pytest

from aki_filetable import ConfigurationError, EntryDescriptor, load_entry_list, parse_entry_list


def test_defaults():
    entries = parse_entry_list([{"file": "a.bin"}])
    assert entries == [EntryDescriptor(Path("a.bin"))]


def test_all_fields():
    entries = parse_entry_list(
        [{"file": "b.lzss", "lzss": True, "symbol": "B", "exportsize": True, "exportsizepad": 8}]
    )
    assert entries == [
        EntryDescriptor(Path("b.lzss"), compressed=True, symbol="B", export_size=True, size_padding=8)
    ]


def test_misspelled_file_key_fails():
    elements = [
        {"file": "a.bin", "symbol": "A"},
        {"fiel": "b.bin", "symbol": "B"},
        {"file": "c.bin", "symbol": "C"},
    ]
    with pytest.raises(ConfigurationError, match="List entry 1: missing 'file'"):
        parse_entry_list(elements)


def test_non_object_element_fails():
    with pytest.raises(ConfigurationError, match="List entry 1: must be an object"):
        parse_entry_list([{"file": "a.bin"}, "comment"])


def test_null_values_use_defaults():
    entries = parse_entry_list([{"file": "a.bin", "lzss": None, "symbol": None}])
    assert entries[0].compressed is False
    assert entries[0].symbol is None


def test_base_dir(tmp_path):
    entries = parse_entry_list([{"file": "a.bin"}, {"file": str(tmp_path / "b.bin")}], tmp_path / "data")
    assert entries[0].source == tmp_path / "data" / "a.bin"
    assert entries[1].source == tmp_path / "b.bin"


def test_list_must_be_array():
    with pytest.raises(ConfigurationError, match="array"):
        parse_entry_list({"file": "a.bin"})


@pytest.mark.parametrize(
    "element",
    [
        {"file": 12},
        {"file": "a.bin", "lzss": "yes"},
        {"file": "a.bin", "symbol": 3},
        {"file": "a.bin", "exportsizepad": True},
        {"file": "a.bin", "exportsizepad": 1.5},
    ],
)
def test_wrong_types(element):
    with pytest.raises(ConfigurationError, match="List entry 0"):
        parse_entry_list([element])


def test_null_file():
    with pytest.raises(ConfigurationError):
        parse_entry_list([{"file": None}])


def test_load_entry_list(tmp_path):
    list_file = tmp_path / "filetable.json"
    list_file.write_text(json.dumps([{"file": "a.bin", "symbol": "A"}]))
    entries = load_entry_list(list_file)
    assert entries[0].symbol == "A"


def test_load_missing_list(tmp_path):
    with pytest.raises(ConfigurationError, match="Unable to read"):
        load_entry_list(tmp_path / "missing.json")


def test_load_invalid_json(tmp_path):
    list_file = tmp_path / "filetable.json"
    list_file.write_text("[{file: a.bin}]")
    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        load_entry_list(list_file)
