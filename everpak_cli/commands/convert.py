"""
Everpak CLI - Convert Command
Usage: everpak data.pak                      (unpacks to data_decompressed.pak)
       everpak data_decompressed.pak         (packs back to data.pak)
       everpak some.bin --mode pack -o out.pak

In auto mode the direction comes from the unpacked-archive marker at the
start of the input. Pass --mode when the payload is not a game archive.
"""
import argparse
import sys
from pathlib import Path
from everpak.config import config
from everpak.errors import PakError
from everpak.format.section_table import is_unpacked
from everpak.packager import Packager
from everpak.unpacker import Unpacker
from everpak.tools.naming import packed_path, unpacked_path
from everpak.utils.logger import logger, set_verbose
from ..progress import progress_bar


def detect_mode(input_path: Path) -> str:
    with open(input_path, 'rb') as f:
        return 'pack' if is_unpacked(f) else 'unpack'


def main(argv=None):
    parser = argparse.ArgumentParser(description="Convert a game archive between packed and unpacked form")
    parser.add_argument("input", help="Path to the archive")
    parser.add_argument("-o", "--output", help="Path to the converted file")
    parser.add_argument("-m", "--mode", choices=['auto', 'pack', 'unpack'], default='auto',
                        help="Conversion direction (default: auto)")
    parser.add_argument("-w", "--workers", type=int, default=None,
                        help="(De)compress on this many threads")
    parser.add_argument("-f", "--force", action="store_true", help="Overwrite existing output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug output")

    args = parser.parse_args(argv)
    set_verbose(args.verbose)

    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {input_path}")
        sys.exit(1)

    mode = args.mode
    if mode == 'auto':
        mode = detect_mode(input_path)
        logger.debug(f"Detected mode: {mode}")

    if args.output:
        output_path = Path(args.output)
    elif mode == 'pack':
        output_path = packed_path(input_path)
    else:
        output_path = unpacked_path(input_path)

    if output_path.exists() and not args.force:
        logger.error(f"Output file exists: {output_path}")
        print("Use -f or --force to overwrite.")
        sys.exit(1)

    output_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        if mode == 'pack':
            logger.info("Compressing file, this might take a while.")
            with progress_bar("Packing", "chunk", config.progress_enabled) as on_progress:
                Packager(workers=args.workers).pack(str(input_path), str(output_path), on_progress=on_progress)
        else:
            logger.info("Decompressing sections, this might take a while.")
            with progress_bar("Unpacking", "section", config.progress_enabled) as on_progress:
                Unpacker(workers=args.workers).unpack(str(input_path), str(output_path), on_progress=on_progress)

        print(f"\n✅ Success! Saved to: {output_path}")

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        sys.exit(130)
    except PakError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
