"""
Everpak Unpacker
Rebuilds the raw payload of a packed archive by inflating every section
in table order. The output has no embedded boundaries, so sections are
always written back in index order.
"""
import os
import time
import shutil
import tempfile
import zlib
from pathlib import Path
from concurrent.futures import ThreadPoolExecutor
from typing import BinaryIO, Callable, Iterator, List, Optional
from ..config import config
from ..errors import DecodeError, TruncatedInput
from ..format.section_table import DEFAULT_LAYOUT, Section, SectionLayout, decode_table
from ..utils.logger import logger


class Unpacker:
    def __init__(
        self,
        workers: int = None,
        batch_size: int = None,
        layout: SectionLayout = DEFAULT_LAYOUT
    ):
        self.workers = workers or config.workers
        self.batch_size = batch_size or config.batch_size
        if self.batch_size < 1:
            raise ValueError(f"Batch size must be at least 1: {self.batch_size}")
        self.layout = layout

    def unpack_stream(self, src: BinaryIO, dst: BinaryIO, on_progress: Optional[Callable] = None) -> dict:
        """
        Inflate every section of src and append it to dst.

        on_progress is called as on_progress(sections_done, section_count).
        Any failure aborts the run; dst is left as far as it got.
        """
        sections = decode_table(src, self.layout)
        count = len(sections)
        logger.debug(f"Decompressing {count} sections")

        unpacked_size = 0
        for done, data in enumerate(self._inflated_sections(src, sections), 1):
            dst.write(data)
            unpacked_size += len(data)
            if on_progress:
                on_progress(done, count)

        last = sections[-1]
        return {
            'section_count': count,
            'packed_size': last.offset + last.size,
            'unpacked_size': unpacked_size
        }

    def read_section(self, src: BinaryIO, index: int) -> bytes:
        """Inflate a single section without touching the others"""
        sections = decode_table(src, self.layout)
        if not 0 <= index < len(sections):
            raise IndexError(f"Section {index} out of range (archive has {len(sections)})")
        section = sections[index]
        return self._inflate(section.index, self._read_raw(src, section))

    def iter_sections(self, src: BinaryIO) -> Iterator[bytes]:
        """Decompressed sections of src, in index order"""
        sections = decode_table(src, self.layout)
        yield from self._inflated_sections(src, sections)

    def unpack(self, package_path: str, output_path: str, on_progress: Optional[Callable] = None) -> dict:
        start_time = time.time()
        tmp_path = None

        try:
            logger.info(f"🔓 Unpacking: {package_path}")

            tmp_fd, tmp_path = tempfile.mkstemp(
                suffix='.tmp',
                dir=Path(output_path).parent
            )

            with os.fdopen(tmp_fd, 'wb') as out_f:
                with open(package_path, 'rb') as in_f:
                    result = self.unpack_stream(in_f, out_f, on_progress)

            shutil.move(tmp_path, output_path)
            tmp_path = None

            elapsed = time.time() - start_time
            logger.info(f"✅ Restored: {output_path}")
            logger.info(f"   Sections:  {result['section_count']}")
            logger.info(f"   Size:      {result['unpacked_size']/1024:.2f} KB")
            logger.info(f"   Time:      {elapsed:.2f}s")

            result.update({
                'success': True,
                'output_path': str(output_path),
                'time': elapsed
            })
            return result

        except ValueError as e:
            logger.error(f"Unpack failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Unpack failed: {e}", exc_info=True)
            raise
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _inflated_sections(self, src: BinaryIO, sections: List[Section]) -> Iterator[bytes]:
        """Yield decompressed sections in index order"""
        if self.workers <= 1:
            for section in sections:
                yield self._inflate(section.index, self._read_raw(src, section))
            return

        # Reads stay on this thread; only inflation is spread over the pool
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            for start in range(0, len(sections), self.batch_size):
                batch = sections[start:start + self.batch_size]
                raw = [self._read_raw(src, section) for section in batch]
                yield from executor.map(self._inflate, [s.index for s in batch], raw)

    def _read_raw(self, src: BinaryIO, section: Section) -> bytes:
        src.seek(section.offset)
        data = src.read(section.size)
        if len(data) < section.size:
            raise TruncatedInput(section.size, len(data), f"section {section.index}")
        return data

    @staticmethod
    def _inflate(index: int, data: bytes) -> bytes:
        try:
            return zlib.decompress(data)
        except zlib.error as e:
            raise DecodeError(index, str(e)) from e


__all__ = ["Unpacker"]
