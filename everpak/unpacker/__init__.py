from .unpacker import Unpacker

__all__ = ["Unpacker"]
