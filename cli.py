"""
Lightning-fast image splitter.

Examples:
  splix photo.png -r 4            Split into 4 equal rows.
  splix photo.png -c 2,3,1,5      Split into four columns of widths
                                  proportional to 2, 3, 1 and 5.
  splix shots/ -r 2 -c 2 -R       Split every image under shots/.
"""
import argparse
import sys
from importlib.metadata import PackageNotFoundError, version

from image_utils.errors import ValidationError
from master.master import run_split
from master.request import DEFAULT_OUTPUT_DIR, build_request


def _version():
    try:
        return version("splix")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="splix",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("images", help="Path of an image, or a directory of images")
    p.add_argument(
        "-r", "--rows",
        help="Number of rows (e.g. 4) or a comma separated list of row weights (e.g. 2,3,1,5)",
    )
    p.add_argument(
        "-c", "--cols",
        help="Number of columns (e.g. 4) or a comma separated list of column weights (e.g. 2,3,1,5)",
    )
    p.add_argument(
        "-d", "--output-dir", default=DEFAULT_OUTPUT_DIR,
        help=f"Directory to save the split images in (default: {DEFAULT_OUTPUT_DIR})",
    )
    p.add_argument("-R", "--recursive", action="store_true",
                   help="Search the directory for images recursively")
    p.add_argument("-j", "--workers", type=int, default=None,
                   help="Number of files processed in parallel (default: CPU count)")
    p.add_argument("-v", "--verbose", action="store_true", help="Print progress")
    p.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        request = build_request(
            args.images,
            rows=args.rows,
            cols=args.cols,
            output_dir=args.output_dir,
            recursive=args.recursive,
            workers=args.workers,
        )
    except ValidationError as e:
        print(f"splix: {e}", file=sys.stderr)
        return 2

    report = run_split(request, verbose=args.verbose)
    print(report.summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
