"""
Everpak CLI Commands
Contains the executable modules for packing, unpacking and inspection.
"""

from . import convert
from . import pack
from . import unpack
from . import inspect

__all__ = ["convert", "pack", "unpack", "inspect"]
