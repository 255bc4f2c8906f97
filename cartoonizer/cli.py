"""Command-line interface for cartoonizer."""

import argparse
import sys
import time

from .config import CartoonConfig, load_config
from .errors import CartoonizerError
from .io import load_image, save_image
from .logging_config import setup_logging
from .pipeline import run_cartoon


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Turn a photograph into a cartoon.")
    p.add_argument("input", help="Path to the input image.")
    p.add_argument("output", help="Where to write the cartoon image.")
    p.add_argument("-c", "--config", help="Path to a YAML file with pipeline parameters.")
    p.add_argument(
        "--halftone",
        action=argparse.BooleanOptionalAction,
        help="Overlay a halftone dot screen per channel (overrides the config file).",
    )
    p.add_argument(
        "--angles",
        type=float,
        nargs=3,
        metavar=("A0", "A1", "A2"),
        help="Screen angles in degrees for channels 0, 1, 2",
    )
    p.add_argument("--max-size", type=int, help="Shrink so the longest side is at most this many pixels.")
    p.add_argument(
        "--parallel",
        action=argparse.BooleanOptionalAction,
        help="Render halftone channels in parallel.",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    p.add_argument("--log-file", help="Also write logs to this file.")
    return p.parse_args(argv)


def build_config(args):
    """Config file first, then command-line overrides."""
    config = load_config(args.config) if args.config else CartoonConfig()
    if args.halftone is not None:
        config.use_halftone = args.halftone
    if args.angles:
        config.halftone.screen_angles = tuple(args.angles)
    if args.max_size is not None:
        config.max_size = args.max_size
    if args.parallel is not None:
        config.halftone.parallel = args.parallel
    config.validate()
    return config


def main(argv=None):
    """Main CLI entry point."""
    args = parse_args(argv)
    setup_logging(level=args.log_level, log_file=args.log_file)

    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    try:
        image = load_image(args.input)
    except Exception as e:
        print(f"Error loading image: {e}", file=sys.stderr)
        return 1

    print(f"Input: {image.shape[1]}x{image.shape[0]}")
    t0 = time.time()
    try:
        output, metrics = run_cartoon(image, config)
    except CartoonizerError as e:
        print(f"Error processing image: {e}", file=sys.stderr)
        return 1

    try:
        save_image(args.output, output)
    except Exception as e:
        print(f"Error saving image: {e}", file=sys.stderr)
        return 1

    print(f"Saved result to {args.output} (took {time.time() - t0:.1f}s)")
    for name, value in metrics.items():
        print(f"  {name}: {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
