#!/usr/bin/env python3
"""CLI interface for facematch."""

import argparse
import logging
import sys
from pathlib import Path

from tqdm import tqdm

from .config import load_config
from .decoder import load_image_file
from .errors import FaceImageError
from .quality import check_quality
from .recognizer import FaceRecognizer
from .selector import select_best

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp", ".webp"}


def _read_encoding(path: str) -> str:
    # Encodings are compared verbatim; only the file's trailing newline goes
    return Path(path).read_text().rstrip("\r\n")


def _cmd_check(args: argparse.Namespace, recognizer: FaceRecognizer) -> int:
    raster = load_image_file(Path(args.image))
    report = check_quality(raster, recognizer.cfg)
    print(report.model_dump_json(indent=2))
    return 0


def _cmd_encode(args: argparse.Namespace, recognizer: FaceRecognizer) -> int:
    encoding = recognizer.encode_raster(load_image_file(Path(args.image)))
    if args.output:
        Path(args.output).write_text(encoding + "\n")
    else:
        print(encoding)
    return 0


def _cmd_compare(args: argparse.Namespace, recognizer: FaceRecognizer) -> int:
    breakdown = recognizer.breakdown(_read_encoding(args.first), _read_encoding(args.second))
    if args.verbose:
        print(breakdown.model_dump_json(indent=2))
    else:
        print(f"{breakdown.total:.2f}")
    return 0


def _cmd_identify(args: argparse.Namespace, recognizer: FaceRecognizer) -> int:
    gallery = Path(args.gallery)
    if not gallery.is_dir():
        print(f"Error: Gallery folder not found: {args.gallery}")
        return 1

    files = sorted(f for f in gallery.iterdir() if f.suffix.lower() in IMAGE_EXTENSIONS)
    candidates: list[tuple[str, str]] = []
    for path in tqdm(files, desc="Encoding gallery", disable=args.quiet):
        try:
            candidates.append((path.stem, recognizer.encode_raster(load_image_file(path))))
        except FaceImageError as e:
            logger.warning(f"Skipping {path.name}: {e}")

    probe = recognizer.encode_raster(load_image_file(Path(args.image)))

    threshold = args.threshold if args.threshold is not None else recognizer.cfg.confidence_threshold
    minimum_gap = args.min_gap if args.min_gap is not None else recognizer.cfg.minimum_gap
    result = select_best(probe, candidates, threshold=threshold, minimum_gap=minimum_gap)

    print(result.model_dump_json(indent=2))
    return 0 if result.matched else 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        description="Encode and match face images",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                       help="Enable debug logging and detailed output")
    parser.add_argument("-q", "--quiet", action="store_true",
                       help="Hide progress bars")

    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Run the quality gate on an image")
    check.add_argument("image", type=str, help="Path to face image")
    check.set_defaults(func=_cmd_check)

    encode = sub.add_parser("encode", help="Print the encoding of an image")
    encode.add_argument("image", type=str, help="Path to face image")
    encode.add_argument("-o", "--output", type=str, default=None,
                       help="Write the encoding to this file instead of stdout")
    encode.set_defaults(func=_cmd_encode)

    compare = sub.add_parser("compare", help="Compare two stored encodings")
    compare.add_argument("first", type=str, help="File containing the first encoding")
    compare.add_argument("second", type=str, help="File containing the second encoding")
    compare.set_defaults(func=_cmd_compare)

    identify = sub.add_parser("identify", help="Match an image against a gallery folder")
    identify.add_argument("image", type=str, help="Path to probe face image")
    identify.add_argument("gallery", type=str,
                         help="Folder of enrolled images (file stem is the candidate id)")
    identify.add_argument("--threshold", type=float, default=None,
                         help="Confidence threshold in percent (default: from config)")
    identify.add_argument("--min-gap", type=float, default=None,
                         help="Minimum best vs second-best gap in percent (default: from config)")
    identify.set_defaults(func=_cmd_identify)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for facematch.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    )

    recognizer = FaceRecognizer(load_config())

    try:
        return int(args.func(args, recognizer))
    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}")
        return 1
    except FaceImageError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
