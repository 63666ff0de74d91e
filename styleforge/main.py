"""Command-line entry point for StyleForge.

This tool loads an image, bounds its width and recompresses it, applies
one of the stylization effects (or a custom filter chain), and saves the
result as ``transformed-<effect>.jpg`` next to the input unless an output
path is given.

All processing occurs on NumPy arrays; Pillow is used only for decoding
and encoding.

Usage example:
    python -m styleforge.main -i input.png -e oil
    python -m styleforge.main -i input.png --filter "sepia(0.5) blur(1px)" -o out.jpg
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .config import EditorConfig
from .effects import EFFECTS
from .effects.tone import apply_chain, format_filter, parse_filter
from .errors import DecodeFailure
from .pipeline import normalize, output_filename, transform
from .utils.loader import decode_image, encode_image, load_image, save_image

_LOGGER = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    argv : list[str] | None
        Optional list of arguments for testing. If None, uses sys.argv.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        prog="styleforge",
        description=(
            "Stylize an image with one of several effects. "
            f"Known effects: {', '.join(EFFECTS)}. Unknown names pass the image through."
        ),
    )

    parser.add_argument("-i", "--input", required=True, help="Path to input image file")
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output JPEG path (default: transformed-<effect>.jpg beside the input)",
    )
    parser.add_argument("-e", "--effect", default="ghibli", help="Effect to apply")
    parser.add_argument(
        "--filter",
        dest="filter_chain",
        default=None,
        help='Custom tone chain instead of an effect, e.g. "saturate(1.3) blur(0.5px)"',
    )
    parser.add_argument("--max-width", type=int, default=EditorConfig.max_width, help="Maximum width after upload normalization")
    parser.add_argument("--quality", type=float, default=EditorConfig.output_quality, help="Output JPEG quality in (0, 1]")
    parser.add_argument(
        "--preview-quality",
        type=float,
        default=EditorConfig.preview_quality,
        help="JPEG quality of the normalized upload in (0, 1]",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return parser.parse_args(argv)


def validate_args(ns: argparse.Namespace) -> EditorConfig:
    """Validate argument values and return the pipeline config.

    Raises ValueError for invalid inputs.
    """
    cfg = EditorConfig(
        max_width=ns.max_width,
        preview_quality=ns.preview_quality,
        output_quality=ns.quality,
    ).validate()
    if not Path(ns.input).is_file():
        raise ValueError(f"Input file not found: {ns.input}")
    if ns.filter_chain is not None:
        parse_filter(ns.filter_chain)
    return cfg


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry function for the CLI.

    Returns
    -------
    int
        0 on success, 1 if the input cannot be decoded, 2 on argument errors.
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        cfg = validate_args(args)
    except ValueError as e:
        print(f"Argument error: {e}")
        return 2

    src = load_image(args.input)
    try:
        normalized = normalize(src, max_width=cfg.max_width, quality=cfg.preview_quality)
        if args.filter_chain is not None:
            chain = parse_filter(args.filter_chain)
            _LOGGER.info("Applying filter chain: %s", format_filter(chain))
            result = encode_image(apply_chain(decode_image(normalized), chain), cfg.output_quality)
            name = output_filename("custom")
        else:
            _LOGGER.info("Applying effect: %s", args.effect)
            result = transform(normalized, args.effect, quality=cfg.output_quality)
            name = output_filename(args.effect)
    except DecodeFailure as e:
        print(f"Decode error: {e}")
        return 1

    out_path = Path(args.output) if args.output else Path(args.input).parent / name
    save_image(result, out_path)
    print(f"Wrote {out_path} ({result.width}x{result.height})")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
