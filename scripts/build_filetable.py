#!/usr/bin/env python3
"""
Build a filetable from a JSON build list.

Usage:
    # Build data, index and symbol files with default names
    python scripts/build_filetable.py -l filetable.json

    # Custom output names
    python scripts/build_filetable.py -l filetable.json -o data.bin -i index.bin -H filetable.h

    # Only regenerate the symbol files
    python scripts/build_filetable.py -l filetable.json -d

    # Show info about each entry
    python scripts/build_filetable.py -l filetable.json -v
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

sys.path.insert(0, str(Path(__file__).parent.parent))
from aki_filetable import BuildResult, FiletableManager, OutputPaths, __version__
from aki_filetable.manager import (
    DEFAULT_DATA_FILE,
    DEFAULT_HEADER_FILE,
    DEFAULT_INCLUDE_FILE,
    DEFAULT_INDEX_FILE,
    DEFAULT_LINKER_FILE,
)


def build_filetable(
    list_file: Path,
    outputs: OutputPaths = OutputPaths(),
    header_only: bool = False,
    verbose: bool = False,
    base_dir: Optional[Path] = None,
) -> BuildResult:
    manager = FiletableManager(verbose=verbose)

    print(f"Loading list from '{list_file}'")
    count = manager.load_list(list_file, base_dir)
    print(f"Total number of files: {count} (0x{count:04X})")

    print("Building filetable")
    result = manager.build(header_only=header_only)
    manager.save(outputs)

    if header_only:
        print(f"Wrote {outputs.header.name}, {outputs.linker.name}, {outputs.include.name}")
    else:
        print(
            f"Wrote {outputs.data.name} ({result.total_size} bytes, md5 {manager.get_data_checksum()})"
        )
        print(f"Wrote {outputs.index.name} (md5 {manager.get_index_checksum()})")
    print("Filetable build process complete.")

    return result


def main():
    parser = argparse.ArgumentParser(
        description=f"akifiletable v{__version__} - Filetable builder for N64 AKI wrestling games"
    )
    parser.add_argument(
        "-l", "--list", required=True, help="JSON filetable list"
    )
    parser.add_argument(
        "-o", "--output", default=DEFAULT_DATA_FILE, help="Output filetable binary filename"
    )
    parser.add_argument(
        "-i", "--index", default=DEFAULT_INDEX_FILE, help="Output filetable index filename"
    )
    parser.add_argument(
        "-H", "--header", default=DEFAULT_HEADER_FILE, help="Output filetable symbol header filename"
    )
    parser.add_argument(
        "-n", "--linker", default=DEFAULT_LINKER_FILE, help="Output filetable linker symbol filename"
    )
    parser.add_argument(
        "-a", "--include", default=DEFAULT_INCLUDE_FILE, help="Output filetable assembly symbol filename"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show info about each entry"
    )
    parser.add_argument(
        "-d", "--header-only", action="store_true", help="Output filetable symbol files only"
    )
    parser.add_argument(
        "--base-dir",
        help="Directory relative entry paths are resolved against (defaults to the working directory)",
    )

    args = parser.parse_args()

    list_file = Path(args.list)
    if not list_file.exists():
        print(f"Error: List file not found: {list_file}")
        sys.exit(1)

    outputs = OutputPaths(
        data=Path(args.output),
        index=Path(args.index),
        header=Path(args.header),
        linker=Path(args.linker),
        include=Path(args.include),
    )
    base_dir = Path(args.base_dir) if args.base_dir else None

    try:
        build_filetable(list_file, outputs, args.header_only, args.verbose, base_dir)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
