"""
Everpak CLI - Inspect Command
Usage: everpak-inspect data.pak --verify
"""
import argparse
import sys
from pathlib import Path
from everpak.errors import PakError
from everpak.tools.inspector import Inspector
from everpak.utils.logger import logger, set_verbose


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Inspect a packed archive without unpacking it"
    )
    parser.add_argument("input", help="Path to the packed archive")
    parser.add_argument("--verify", action="store_true",
                        help="Decompress every section and report the payload checksum")
    parser.add_argument("--against", help="Raw payload the archive should reproduce")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug output")

    args = parser.parse_args(argv)
    set_verbose(args.verbose)

    path = Path(args.input)
    if not path.exists():
        logger.error(f"Archive not found: {path}")
        sys.exit(1)

    try:
        info = Inspector().inspect(str(path), verify=args.verify, against=args.against)
    except PakError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(f"Inspection failed: {e}")
        sys.exit(1)

    if info['matches'] is False:
        sys.exit(2)


if __name__ == "__main__":
    main()
