from .inspector import Inspector
from .naming import packed_path, unpacked_path

__all__ = ["Inspector", "packed_path", "unpacked_path"]
