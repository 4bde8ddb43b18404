"""
Everpak
Converts chunk-compressed game archives to their raw payload and back.
"""
from .errors import (
    PakError,
    BadSectionCount,
    BadSectionTable,
    FileTooLarge,
    EmptyInput,
    TruncatedInput,
    DecodeError,
)
from .packager import Packager
from .unpacker import Unpacker

__version__ = "0.1.0"

__all__ = [
    "Packager",
    "Unpacker",
    "PakError",
    "BadSectionCount",
    "BadSectionTable",
    "FileTooLarge",
    "EmptyInput",
    "TruncatedInput",
    "DecodeError",
]
