from .section_table import (
    PAK_MAGIC,
    HEADER_SIZE,
    SECTION_SIZE,
    MAX_SECTION_COUNT,
    MAX_FILE_SIZE,
    SectionLayout,
    DEFAULT_LAYOUT,
    Section,
    decode_table,
    encode_table,
    write_table,
    is_unpacked,
)

__all__ = [
    "PAK_MAGIC",
    "HEADER_SIZE",
    "SECTION_SIZE",
    "MAX_SECTION_COUNT",
    "MAX_FILE_SIZE",
    "SectionLayout",
    "DEFAULT_LAYOUT",
    "Section",
    "decode_table",
    "encode_table",
    "write_table",
    "is_unpacked",
]
