"""
Everpak Checksum Utility
Calculates SHA-256 hashes for payload verification.
"""
import hashlib
from typing import Iterable

def calculate_chunks_checksum(chunks: Iterable[bytes]) -> str:
    """
    Calculates the SHA-256 checksum of a payload delivered in pieces.

    Args:
        chunks: iterable of byte strings, hashed in order

    Returns:
        str: The hexadecimal hash string
    """
    sha256_hash = hashlib.sha256()
    for chunk in chunks:
        sha256_hash.update(chunk)
    return sha256_hash.hexdigest()

def calculate_file_checksum(file_path: str) -> str:
    """
    Calculates the SHA-256 checksum of a file efficiently.
    """
    sha256_hash = hashlib.sha256()
    with open(file_path, "rb") as f:
        # Read in 64kb chunks to save memory
        for byte_block in iter(lambda: f.read(65536), b""):
            sha256_hash.update(byte_block)
    return sha256_hash.hexdigest()

__all__ = ["calculate_chunks_checksum", "calculate_file_checksum"]
