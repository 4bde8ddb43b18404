"""
Everpak Packager
Splits a raw payload into SECTION_SIZE chunks, deflates each one on its own
and writes them after a reserved header. The offset table is only known
once the last chunk is out, so the header is written twice: zero
placeholder first, real table last.
"""
import io
import os
import time
import shutil
import tempfile
import zlib
from pathlib import Path
from concurrent.futures import ThreadPoolExecutor
from typing import BinaryIO, Callable, Iterator, Optional
from ..config import config
from ..format.section_table import (
    DEFAULT_LAYOUT,
    SectionLayout,
    check_input_size,
    stream_length,
    write_table,
)
from ..utils.logger import logger


class Packager:
    def __init__(
        self,
        compression_level: int = None,
        workers: int = None,
        batch_size: int = None,
        layout: SectionLayout = DEFAULT_LAYOUT
    ):
        self.compression_level = config.compression_level if compression_level is None else compression_level
        if not -1 <= self.compression_level <= 9:
            raise ValueError(f"Invalid zlib compression level: {self.compression_level}")

        self.workers = workers or config.workers
        self.batch_size = batch_size or config.batch_size
        if self.batch_size < 1:
            raise ValueError(f"Batch size must be at least 1: {self.batch_size}")
        self.layout = layout

    def pack_stream(self, src: BinaryIO, dst: BinaryIO, on_progress: Optional[Callable] = None) -> dict:
        """
        Pack the whole of src into dst.

        dst must be empty, writable and seekable. on_progress is called as
        on_progress(chunks_done, total_chunks) after every chunk.
        """
        src.seek(0)
        original_size = stream_length(src)
        check_input_size(original_size, self.layout)

        total_chunks = self.layout.section_count_for(original_size)
        logger.debug(f"Packing {original_size} bytes into {total_chunks} sections")

        dst.write(bytes(self.layout.header_size))

        offsets = []
        for compressed in self._compressed_chunks(src):
            offsets.append(dst.tell())
            dst.write(compressed)
            if on_progress:
                on_progress(len(offsets), total_chunks)

        write_table(dst, offsets, self.layout)
        packed_size = dst.seek(0, io.SEEK_END)

        return {
            'section_count': len(offsets),
            'offsets': offsets,
            'original_size': original_size,
            'packed_size': packed_size
        }

    def pack(self, input_path: str, output_path: str, on_progress: Optional[Callable] = None) -> dict:
        start_time = time.time()
        tmp_path = None

        try:
            logger.info(f"📦 Packing: {input_path} [level {self.compression_level}]")

            tmp_fd, tmp_path = tempfile.mkstemp(
                suffix='.pak.tmp',
                dir=Path(output_path).parent
            )

            with os.fdopen(tmp_fd, 'w+b') as out_f:
                with open(input_path, 'rb') as in_f:
                    result = self.pack_stream(in_f, out_f, on_progress)

            shutil.move(tmp_path, output_path)
            tmp_path = None

            elapsed = time.time() - start_time
            original_size = result['original_size']
            packed_size = result['packed_size']

            logger.info(f" Packing Complete!")
            logger.info(f"   Original:  {original_size/1024:.2f} KB")
            logger.info(f"   Packed:    {packed_size/1024:.2f} KB")
            logger.info(f"   Sections:  {result['section_count']}")
            logger.info(f"   Time:      {elapsed:.2f}s")

            result.update({
                'success': True,
                'output_file': str(output_path),
                'compression_ratio': packed_size / original_size,
                'processing_time': elapsed
            })
            return result

        except ValueError as e:
            logger.error(f"Packing failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Packing failed: {e}", exc_info=True)
            raise
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _compressed_chunks(self, src: BinaryIO) -> Iterator[bytes]:
        """Yield compressed chunks in input order"""
        if self.workers <= 1:
            while chunk := self._read_chunk(src):
                yield self._compress(chunk)
            return

        # Chunks are independent, so a batch can be deflated in parallel.
        # executor.map keeps input order, which keeps the offsets correct.
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            while True:
                batch = []
                while len(batch) < self.batch_size:
                    chunk = self._read_chunk(src)
                    if not chunk:
                        break
                    batch.append(chunk)

                yield from executor.map(self._compress, batch)

                if len(batch) < self.batch_size:
                    break

    def _read_chunk(self, src: BinaryIO) -> bytes:
        """Read one full section worth of input; only the last one may be short"""
        chunk = src.read(self.layout.section_size)
        while chunk and len(chunk) < self.layout.section_size:
            more = src.read(self.layout.section_size - len(chunk))
            if not more:
                break
            chunk += more
        return chunk

    def _compress(self, chunk: bytes) -> bytes:
        return zlib.compress(chunk, self.compression_level)


__all__ = ["Packager"]
