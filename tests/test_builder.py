"""Tests for offset assignment and index encoding."""

import random

import pytest

from aki_filetable import (
    AllocationFailure,
    BuildState,
    ConfigurationError,
    EntryDescriptor,
    FiletableBuilder,
    MalformedCompressedHeader,
    fold_entry,
)
from aki_filetable.model import decode_offset, padded_length

FOO_DATA = b"\xaa" * 5
BAR_DATA = b"\x00\x00\x01\x00\x12\x34"


def _two_entry_result(header_only=False):
    builder = FiletableBuilder(header_only=header_only)
    return builder.build(
        [
            (EntryDescriptor("foo.bin", symbol="FOO"), FOO_DATA),
            (EntryDescriptor("bar.lzss", compressed=True, symbol="BAR", export_size=True), BAR_DATA),
        ]
    )


class TestTwoEntryScenario:
    def test_offsets_and_flags(self):
        result = _two_entry_result()
        assert [e.offset for e in result.entries] == [0, 6]
        assert result.records == [b"\x00\x00\x00\x00", b"\x00\x00\x00\x07"]
        assert result.records[0][3] & 1 == 0
        assert result.records[1][3] & 1 == 1

    def test_sentinel(self):
        result = _two_entry_result()
        assert result.total_size == 12
        assert result.sentinel == b"\x00\x00\x00\x0c"
        assert result.index == b"\x00\x00\x00\x00\x00\x00\x00\x07\x00\x00\x00\x0c"

    def test_data_blob(self):
        result = _two_entry_result()
        assert result.data == FOO_DATA + b"\x00" + BAR_DATA

    def test_symbols(self):
        result = _two_entry_result()
        assert result.symbol_ids() == [("FOO", 1), ("BAR", 2)]
        assert result.exported_sizes() == [("BAR", 256)]
        table = result.symbol_table()
        assert table["FOO"].size is None
        assert table["BAR"].ordinal == 2
        assert table["BAR"].size == 256

    def test_counts(self):
        result = _two_entry_result()
        assert result.num_entries == 2
        assert result.index_size == 8

    def test_header_only_keeps_offsets(self):
        full = _two_entry_result()
        header_only = _two_entry_result(header_only=True)
        assert header_only.data == b""
        assert header_only.index == full.index
        assert header_only.symbols == full.symbols


def test_fold_entry_is_pure():
    state = BuildState()
    next_state, entry = fold_entry(state, EntryDescriptor("a.bin"), b"\x01\x02\x03")
    assert state == BuildState(cursor=0, count=0)
    assert next_state == BuildState(cursor=4, count=1)
    assert entry.ordinal == 1
    assert entry.offset == 0
    assert entry.raw_length == 3
    assert entry.padded_length == 4


def test_plain_export_uses_raw_length_plus_padding():
    builder = FiletableBuilder()
    entry = builder.add(
        EntryDescriptor("odd.bin", symbol="ODD", export_size=True, size_padding=0x20), b"\x01" * 7
    )
    assert entry.exported_size == 7 + 0x20


def test_compressed_export_adds_padding_to_logical_size():
    builder = FiletableBuilder()
    entry = builder.add(
        EntryDescriptor("c.lzss", compressed=True, symbol="C", export_size=True, size_padding=4),
        b"\x00\x00\x10\x00\xff",
    )
    assert entry.exported_size == 0x1004


def test_padding_without_export_is_not_exported():
    result = FiletableBuilder().build([(EntryDescriptor("a.bin", symbol="A", size_padding=4), b"ab")])
    assert result.exported_sizes() == []


def test_export_size_without_symbol_fails():
    builder = FiletableBuilder()
    with pytest.raises(ConfigurationError):
        builder.add(EntryDescriptor("a.bin", export_size=True), b"ab")
    assert builder.cursor == 0


def test_size_padding_without_symbol_fails():
    with pytest.raises(ConfigurationError):
        FiletableBuilder().build([(EntryDescriptor("a.bin", size_padding=2), b"ab")])


def test_short_compressed_entry_fails():
    with pytest.raises(MalformedCompressedHeader):
        FiletableBuilder().build([(EntryDescriptor("c.lzss", compressed=True), b"\x00\x01\x02")])


class _FullBuffer(bytearray):
    def __iadd__(self, other):
        raise MemoryError()


def test_blob_growth_out_of_memory():
    builder = FiletableBuilder()
    builder._data = _FullBuffer()
    with pytest.raises(AllocationFailure) as excinfo:
        builder.add(EntryDescriptor("big.bin"), b"\x01\x02")
    assert isinstance(excinfo.value.__cause__, MemoryError)
    assert builder.cursor == 0
    assert builder.finish().num_entries == 0


def test_empty_entry_list():
    result = FiletableBuilder().build([])
    assert result.num_entries == 0
    assert result.index == b"\x00\x00\x00\x00"
    assert result.data == b""


def test_empty_entry_takes_no_space():
    result = FiletableBuilder().build(
        [(EntryDescriptor("empty.bin"), b""), (EntryDescriptor("b.bin"), b"xy")]
    )
    assert [e.offset for e in result.entries] == [0, 0]
    assert result.total_size == 2


def _random_entries(seed):
    rng = random.Random(seed)
    items = []
    for i in range(rng.randint(1, 40)):
        compressed = rng.random() < 0.4
        length = rng.randint(4 if compressed else 0, 64)
        data = bytes(rng.randrange(256) for _ in range(length))
        items.append((EntryDescriptor(f"entry{i}.bin", compressed=compressed), data))
    return items


@pytest.mark.parametrize("seed", range(10))
def test_layout_properties(seed):
    items = _random_entries(seed)
    result = FiletableBuilder().build(items)

    assert result.total_size == sum(padded_length(len(data)) for _, data in items)
    assert result.total_size == len(result.data)
    assert result.entries[0].offset == 0

    offsets = [e.offset for e in result.entries] + [result.total_size]
    for i, (descriptor, data) in enumerate(items):
        assert offsets[i] % 2 == 0
        assert offsets[i + 1] == offsets[i] + padded_length(len(data))

        record = result.records[i]
        assert record[3] & 1 == int(descriptor.compressed)
        assert record[3] & 0xFE == offsets[i] & 0xFE
        assert decode_offset(record) == (offsets[i], descriptor.compressed)

        stored = result.data[offsets[i] : offsets[i + 1]]
        assert stored[: len(data)] == data
        assert len(stored) - len(data) in (0, 1)
        assert stored[len(data) :] in (b"", b"\x00")
