import io
import random
import pytest
from everpak.format.section_table import SectionLayout
from everpak.packager import Packager


def make_payload(size: int, seed: int = 1234) -> bytes:
    """Half compressible text, half noise, so sections differ in size"""
    rng = random.Random(seed)
    text = b"everpak section payload " * (size // 48 + 1)
    noise = bytes(rng.getrandbits(8) for _ in range(min(size, 4096)))
    out = bytearray()
    while len(out) < size:
        out += text[:size // 2] + noise
    return bytes(out[:size])


def pack_bytes(data: bytes, **kwargs) -> io.BytesIO:
    dst = io.BytesIO()
    Packager(**kwargs).pack_stream(io.BytesIO(data), dst)
    dst.seek(0)
    return dst


@pytest.fixture
def tiny_layout():
    # 3 sections of 4 bytes at most
    return SectionLayout(header_size=32, section_size=4)


@pytest.fixture
def payload():
    return make_payload(0x8000 * 3 + 0x123)
