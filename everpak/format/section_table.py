"""
Everpak Section Table
Fixed-size header of a packed archive: a u64 section count followed by
one u64 absolute offset per compressed section, zero padded to HEADER_SIZE.
Section sizes are never stored; they are derived from the next offset,
or from the end of the stream for the last section.
"""
import io
import struct
from dataclasses import dataclass
from typing import BinaryIO, List, NamedTuple, Sequence
from ..errors import BadSectionCount, BadSectionTable, EmptyInput, FileTooLarge, TruncatedInput
from ..utils.logger import logger


U64 = struct.Struct('<Q')

# First 8 bytes of an unpacked game archive ("1SERpak\0" little endian)
PAK_MAGIC = 0x6B617052455331

HEADER_SIZE = 0x600000
SECTION_SIZE = 0x8000
MAX_SECTION_COUNT = HEADER_SIZE // U64.size - 1
MAX_FILE_SIZE = SECTION_SIZE * MAX_SECTION_COUNT


@dataclass(frozen=True)
class SectionLayout:
    header_size: int = HEADER_SIZE
    section_size: int = SECTION_SIZE

    def __post_init__(self):
        if self.header_size < 2 * U64.size or self.header_size % U64.size:
            raise ValueError(f"Header size must be a multiple of 8 and at least 16: {self.header_size}")
        if self.section_size <= 0:
            raise ValueError(f"Section size must be positive: {self.section_size}")

    @property
    def max_section_count(self) -> int:
        # One slot is taken by the count itself
        return self.header_size // U64.size - 1

    @property
    def max_file_size(self) -> int:
        return self.section_size * self.max_section_count

    def section_count_for(self, size: int) -> int:
        return -(-size // self.section_size)


DEFAULT_LAYOUT = SectionLayout()


class Section(NamedTuple):
    index: int
    offset: int
    size: int


# ── Stream helpers ─────────────────────────────────────────────────────────

def read_u64(stream: BinaryIO, what: str = "header") -> int:
    data = stream.read(U64.size)
    if len(data) < U64.size:
        raise TruncatedInput(U64.size, len(data), what)
    return U64.unpack(data)[0]


def stream_length(stream: BinaryIO) -> int:
    """Length of a seekable stream, leaving its position untouched"""
    pos = stream.tell()
    end = stream.seek(0, io.SEEK_END)
    stream.seek(pos)
    return end


def is_unpacked(stream: BinaryIO) -> bool:
    """True if the stream starts with the unpacked archive marker"""
    pos = stream.tell()
    stream.seek(0)
    head = stream.read(U64.size)
    stream.seek(pos)
    return len(head) == U64.size and U64.unpack(head)[0] == PAK_MAGIC


# ── Validation ─────────────────────────────────────────────────────────────

def check_section_count(count: int, layout: SectionLayout = DEFAULT_LAYOUT):
    if count == 0 or count > layout.max_section_count:
        raise BadSectionCount(count, layout.max_section_count)


def check_input_size(size: int, layout: SectionLayout = DEFAULT_LAYOUT):
    if size == 0:
        raise EmptyInput("Input is empty, nothing to pack")
    if size > layout.max_file_size:
        raise FileTooLarge(size, layout.max_file_size)


# ── Codec ──────────────────────────────────────────────────────────────────

def decode_table(stream: BinaryIO, layout: SectionLayout = DEFAULT_LAYOUT) -> List[Section]:
    """
    Read the header of a packed archive and return its sections in order.

    Raises BadSectionCount for a zero or over-limit count, BadSectionTable
    when offsets do not start right after the header or are not strictly
    increasing, and TruncatedInput when the header or the last section
    runs past the end of the stream.
    """
    total = stream_length(stream)
    stream.seek(0)

    count = read_u64(stream)
    check_section_count(count, layout)

    table_size = count * U64.size
    raw = stream.read(table_size)
    if len(raw) < table_size:
        raise TruncatedInput(table_size, len(raw), "offset table")
    offsets = struct.unpack(f'<{count}Q', raw)

    if offsets[0] != layout.header_size:
        raise BadSectionTable(
            f"First section starts at {offsets[0]:#x}, expected {layout.header_size:#x}"
        )

    sections = []
    for index in range(count - 1):
        size = offsets[index + 1] - offsets[index]
        if size <= 0:
            raise BadSectionTable(
                f"Section {index + 1} offset {offsets[index + 1]:#x} does not follow {offsets[index]:#x}"
            )
        sections.append(Section(index, offsets[index], size))

    last = offsets[-1]
    if last >= total:
        raise TruncatedInput(last + 1, total, "archive")
    sections.append(Section(count - 1, last, total - last))

    logger.debug(f"Decoded section table: {count} sections, {total} bytes")
    return sections


def encode_table(offsets: Sequence[int], layout: SectionLayout = DEFAULT_LAYOUT) -> bytes:
    """Serialize the section count and offsets, without the zero padding"""
    count = len(offsets)
    check_section_count(count, layout)
    return struct.pack(f'<{count + 1}Q', count, *offsets)


def write_table(stream: BinaryIO, offsets: Sequence[int], layout: SectionLayout = DEFAULT_LAYOUT):
    """Overwrite the reserved header region with the final table"""
    table = encode_table(offsets, layout)
    stream.seek(0)
    stream.write(table)


__all__ = [
    "PAK_MAGIC",
    "HEADER_SIZE",
    "SECTION_SIZE",
    "MAX_SECTION_COUNT",
    "MAX_FILE_SIZE",
    "SectionLayout",
    "DEFAULT_LAYOUT",
    "Section",
    "read_u64",
    "stream_length",
    "is_unpacked",
    "check_section_count",
    "check_input_size",
    "decode_table",
    "encode_table",
    "write_table",
]
