"""
Everpak Archive Inspector
Peek inside a packed archive without writing anything.
"""
from pathlib import Path
from ..format.section_table import DEFAULT_LAYOUT, SectionLayout, decode_table
from ..unpacker.unpacker import Unpacker
from ..utils.checksum import calculate_chunks_checksum, calculate_file_checksum
from ..utils.logger import logger


class Inspector:
    def __init__(self, layout: SectionLayout = DEFAULT_LAYOUT):
        self.layout = layout

    def inspect(self, package_path: str, verify: bool = False, against: str = None, show: bool = True) -> dict:
        """
        Read the section table of an archive.

        verify: also inflate every section (nothing is written) and report
                the unpacked size and SHA-256 of the payload.
        against: path of the raw payload the archive should reproduce;
                 implies verify.
        """
        path = Path(package_path)
        if not path.exists():
            raise ValueError(f"Archive not found: {package_path}")

        with open(path, 'rb') as f:
            sections = decode_table(f, self.layout)

            sizes = [s.size for s in sections]
            info = {
                'archive_path': str(path),
                'archive_size': sections[-1].offset + sections[-1].size,
                'section_count': len(sections),
                'first_offset': sections[0].offset,
                'last_offset': sections[-1].offset,
                'min_section_size': min(sizes),
                'max_section_size': max(sizes),
                'max_unpacked_size': len(sections) * self.layout.section_size,
                'unpacked_size': None,
                'checksum': None,
                'matches': None,
            }

            if verify or against:
                info.update(self._verify(f))

        if against:
            expected = calculate_file_checksum(against)
            info['matches'] = expected == info['checksum']
            if not info['matches']:
                logger.warning(f"Payload does not match {against}")

        if show:
            self._print(info)
        return info

    def _verify(self, f) -> dict:
        unpacker = Unpacker(workers=1, layout=self.layout)
        total = 0

        def counted():
            nonlocal total
            for data in unpacker.iter_sections(f):
                total += len(data)
                yield data

        checksum = calculate_chunks_checksum(counted())
        logger.info(f"✅ All sections decompressed")
        return {'unpacked_size': total, 'checksum': checksum}

    def _print(self, info: dict):
        def fmt_size(b):
            if b is None:
                return 'unknown'
            if b >= 1024 * 1024:
                return f"{b/1024/1024:.2f} MB"
            return f"{b/1024:.1f} KB"

        print(f"\n{'='*50}")
        print(f"  Everpak Archive Inspection")
        print(f"{'='*50}")
        print(f"  File:        {info['archive_path']}")
        print(f"  Sections:    {info['section_count']}")
        print(f"  First:       {info['first_offset']:#x}")
        print(f"  Last:        {info['last_offset']:#x}")
        print(f"  Smallest:    {info['min_section_size']} bytes")
        print(f"  Largest:     {info['max_section_size']} bytes")
        print()
        print(f"  Packed:      {fmt_size(info['archive_size'])}")
        print(f"  Unpacked:    {fmt_size(info['unpacked_size'])} (at most {fmt_size(info['max_unpacked_size'])})")
        if info['checksum']:
            print(f"  SHA-256:     {info['checksum']}")
        if info['matches'] is not None:
            print(f"  Matches:     {'yes' if info['matches'] else 'NO'}")
        print(f"{'='*50}\n")


__all__ = ["Inspector"]
