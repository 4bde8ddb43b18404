"""
Everpak Output Naming
Derives the output path of a conversion from the input file name:
  foo.pak              -> foo_decompressed.pak   (unpack)
  foo_decompressed.pak -> foo.pak                (pack)
Only the file name is rewritten, never the parent directories.
"""
from pathlib import Path
from ..config import config


def unpacked_path(input_path, packed_marker: str = None, unpacked_marker: str = None) -> Path:
    packed_marker = packed_marker or config.packed_marker
    unpacked_marker = unpacked_marker or config.unpacked_marker
    return _substitute(Path(input_path), packed_marker, unpacked_marker, fallback='.unpacked')


def packed_path(input_path, packed_marker: str = None, unpacked_marker: str = None) -> Path:
    packed_marker = packed_marker or config.packed_marker
    unpacked_marker = unpacked_marker or config.unpacked_marker
    return _substitute(Path(input_path), unpacked_marker, packed_marker, fallback='.packed')


def _substitute(path: Path, old: str, new: str, fallback: str) -> Path:
    name = path.name.replace(old, new)
    if name == path.name:
        # Marker not in the name; never write over the input
        name = path.name + fallback
    return path.with_name(name)


__all__ = ["unpacked_path", "packed_path"]
