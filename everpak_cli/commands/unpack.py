"""
Everpak CLI - Unpack Command
Usage: everpak-unpack data.pak -o data_decompressed.pak
"""
import argparse
import sys
from pathlib import Path
from everpak.config import config
from everpak.errors import PakError
from everpak.unpacker import Unpacker
from everpak.tools.naming import unpacked_path
from everpak.utils.logger import logger, set_verbose
from ..progress import progress_bar


def main(argv=None):
    parser = argparse.ArgumentParser(description="Rebuild the raw payload of a chunk-compressed archive")
    parser.add_argument("input", help="Path to the packed archive")
    parser.add_argument("-o", "--output", help="Path to the unpacked payload")
    parser.add_argument("-w", "--workers", type=int, default=None,
                        help="Decompress sections on this many threads")
    parser.add_argument("-f", "--force", action="store_true", help="Overwrite existing output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug output")

    args = parser.parse_args(argv)
    set_verbose(args.verbose)

    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Archive not found: {input_path}")
        sys.exit(1)

    output_path = Path(args.output) if args.output else unpacked_path(input_path)
    if output_path.exists() and not args.force:
        logger.error(f"Output file exists: {output_path}")
        print("Use -f or --force to overwrite.")
        sys.exit(1)

    output_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        unpacker = Unpacker(workers=args.workers)
        with progress_bar("Unpacking", "section", config.progress_enabled) as on_progress:
            result = unpacker.unpack(str(input_path), str(output_path), on_progress=on_progress)

        print(f"\n✅ Success! Restored to: {result['output_path']}")

    except KeyboardInterrupt:
        print("\n❌ Operation cancelled by user.")
        sys.exit(130)
    except PakError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
