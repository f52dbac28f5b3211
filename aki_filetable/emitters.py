"""
Symbol file rendering: C header, linker script and assembler include.
"""

from typing import List

from .builder import BuildResult
from .errors import ConfigurationError

GENERATED_BANNER = "Generated by akifiletable, DO NOT EDIT"
SYMBOL_ID_PREFIX = "FILEID_"
SYMBOL_SIZE_PREFIX = "FILESIZE_"


def _check_unique(result: BuildResult) -> None:
    seen = {}
    for name, ordinal in result.symbol_ids():
        if name in seen:
            raise ConfigurationError(
                f"Symbol '{name}' is defined by entries 0x{seen[name]:04X} and 0x{ordinal:04X}"
            )
        seen[name] = ordinal


def _symbol_lines(result: BuildResult, id_fmt: str, size_fmt: str) -> List[str]:
    lines = []
    for symbol in result.symbols:
        lines.append(id_fmt.format(name=SYMBOL_ID_PREFIX + symbol.name, value=symbol.ordinal))
        if symbol.size is not None:
            lines.append(size_fmt.format(name=SYMBOL_SIZE_PREFIX + symbol.name, value=symbol.size))
    return lines


def render_header(result: BuildResult) -> str:
    _check_unique(result)
    lines = [
        f"/* {GENERATED_BANNER} */",
        "#ifndef _FILETABLE_H_",
        "#define _FILETABLE_H_",
        "",
        "/* Filetable Information */",
        f"#define FILETABLE_NUM_FILES 0x{result.num_entries:04X}",
        "#define FILETABLE_INDEX_SIZE (FILETABLE_NUM_FILES * 4)",
        "",
        "/* friendly names for filetable entries */",
    ]
    lines += _symbol_lines(result, "#define {name} 0x{value:04X}", "#define {name} {value}")
    lines += ["", "#endif", ""]
    return "\n".join(lines)


def render_linker(result: BuildResult) -> str:
    _check_unique(result)
    lines = [
        f"/* {GENERATED_BANNER} */",
        f"FILETABLE_NUM_FILES = 0x{result.num_entries:04X};",
        "FILETABLE_INDEX_SIZE = (FILETABLE_NUM_FILES * 4);",
    ]
    lines += _symbol_lines(result, "{name} = 0x{value:04X};", "{name} = {value};")
    return "\n".join(lines) + "\n"


def render_include(result: BuildResult) -> str:
    _check_unique(result)
    lines = [
        f"# {GENERATED_BANNER}",
        f".set FILETABLE_NUM_FILES, 0x{result.num_entries:04X};",
        ".set FILETABLE_INDEX_SIZE, (FILETABLE_NUM_FILES * 4);",
    ]
    lines += _symbol_lines(result, ".set {name}, 0x{value:04X};", ".set {name},{value};")
    return "\n".join(lines) + "\n"
