#!/usr/bin/env python3
"""
List or export entries of a built filetable.

Usage:
    # List all entries
    python scripts/inspect_filetable.py list filetable.bin filetable_index.bin

    # Export a single entry by file id (1-based, as in FILEID_ symbols)
    python scripts/inspect_filetable.py export filetable.bin filetable_index.bin 0x2A output.bin

    # Export all entries to a directory
    python scripts/inspect_filetable.py export-all filetable.bin filetable_index.bin output_dir/
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))
from aki_filetable import FiletableManager, format_size


def list_entries(data_file: Path, index_file: Path) -> int:
    manager = FiletableManager()
    count = manager.load_filetable(data_file, index_file)

    for i in range(count):
        offset, size, compressed = manager.get_entry_info(i)
        flag = "lzss" if compressed else "    "
        print(f"0x{i + 1:04X}  0x{offset:08X}  {flag}  {format_size(size)}")

    print(f"{count} entries, {format_size(manager.filetable.total_size)}")
    return count


def export_entry(data_file: Path, index_file: Path, file_id: int, output_path: Path) -> None:
    manager = FiletableManager()
    count = manager.load_filetable(data_file, index_file)

    if file_id < 1 or file_id > count:
        raise ValueError(f"File id 0x{file_id:04X} out of range (0x0001-0x{count:04X})")

    manager.export_entry(file_id - 1, output_path)
    print(f"Exported entry 0x{file_id:04X} to {output_path.name}")


def export_all(data_file: Path, index_file: Path, output_dir: Path) -> int:
    output_dir.mkdir(parents=True, exist_ok=True)

    manager = FiletableManager()
    manager.load_filetable(data_file, index_file)

    exported = manager.export_all(output_dir)
    print(f"Exported {exported} entries to {output_dir}/")
    return exported


def main():
    parser = argparse.ArgumentParser(description="List or export entries of a built filetable.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List all entries")
    list_parser.add_argument("data_file", help="Filetable data file")
    list_parser.add_argument("index_file", help="Filetable index file")

    export_parser = subparsers.add_parser("export", help="Export a single entry")
    export_parser.add_argument("data_file", help="Filetable data file")
    export_parser.add_argument("index_file", help="Filetable index file")
    export_parser.add_argument(
        "file_id", type=lambda s: int(s, 0), help="File id to export (1-based)"
    )
    export_parser.add_argument("output", help="Output file path")

    all_parser = subparsers.add_parser("export-all", help="Export all entries to directory")
    all_parser.add_argument("data_file", help="Filetable data file")
    all_parser.add_argument("index_file", help="Filetable index file")
    all_parser.add_argument("output_dir", help="Output directory")

    args = parser.parse_args()

    data_file = Path(args.data_file)
    index_file = Path(args.index_file)
    for path in (data_file, index_file):
        if not path.exists():
            print(f"Error: File not found: {path}")
            sys.exit(1)

    try:
        if args.command == "list":
            list_entries(data_file, index_file)

        elif args.command == "export":
            export_entry(data_file, index_file, args.file_id, Path(args.output))

        elif args.command == "export-all":
            export_all(data_file, index_file, Path(args.output_dir))

    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
