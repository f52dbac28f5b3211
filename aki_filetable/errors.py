"""
Errors raised while building a filetable.

Every error aborts the whole build; nothing is skipped or retried.
"""

from pathlib import Path
from typing import Optional, Union


class FiletableError(Exception):
    """Base class for filetable build failures."""

    def __init__(self, message: str, source: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.source = source


class ConfigurationError(FiletableError, ValueError):
    """The entry list breaks the symbol/size-export contract or is malformed."""


class SourceUnreadable(FiletableError):
    """A listed source file cannot be opened or read."""


class MalformedCompressedHeader(FiletableError):
    """A compression-marked source is too short to hold its size header."""


class AllocationFailure(FiletableError):
    """Raw bytes for an entry could not be staged in memory."""
