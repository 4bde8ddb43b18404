"""
Everpak Errors
Every format error is a ValueError: permanent, never worth retrying.
Storage failures surface as the OSError raised by the file object.
"""


class PakError(ValueError):
    """Base class for malformed or unsupported archive input"""


class BadSectionCount(PakError):
    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(f"Bad section count: {count} (expected 1..{limit})")


class BadSectionTable(PakError):
    """Offset table is not contiguous and strictly increasing"""


class FileTooLarge(PakError):
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"File too large: {size} bytes exceeds limit of {limit} bytes")


class EmptyInput(PakError):
    """Nothing to pack"""


class TruncatedInput(PakError):
    def __init__(self, expected: int, actual: int, what: str = "section"):
        self.expected = expected
        self.actual = actual
        self.what = what
        super().__init__(f"Truncated {what}: expected {expected} bytes, got {actual}")


class DecodeError(PakError):
    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"Failed to decompress section {index}: {reason}")


__all__ = [
    "PakError",
    "BadSectionCount",
    "BadSectionTable",
    "FileTooLarge",
    "EmptyInput",
    "TruncatedInput",
    "DecodeError",
]
