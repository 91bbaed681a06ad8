"""
Pointillist Command Line
========================

Turns any GIF into a pointillist style GIF.

Usage:
    pointillist -i input.gif -o output.gif
    pointillist -i input.gif -o output.gif -b 6 -p 1 -r 5 -d 4
    pointillist -i input.gif -o output.gif --key darkness --config pointillist.yaml

Exit Codes:
    0 - Output written
    1 - Decode, encode or file error
    2 - Invalid arguments or configuration
"""

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from pointillist import __version__
from pointillist.codec import PointillistError
from pointillist.config import Settings, load_config, setup_logging
from pointillist.pipeline import KEY_FUNCTIONS
from pointillist.runner import run_pipeline


logger = logging.getLogger(__name__)


EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser. Optional values default to None so
    config file and environment values apply when a flag is omitted."""
    parser = argparse.ArgumentParser(
        prog="pointillist",
        description="Turns any gif into a pointillist style gif.",
    )
    parser.add_argument(
        "-i", "--in-path",
        required=True,
        help="Path to the input GIF file",
    )
    parser.add_argument(
        "-o", "--out-path",
        required=True,
        help="Path to the output GIF file",
    )
    parser.add_argument(
        "-b", "--block-size",
        type=int,
        default=None,
        help="Size of the blocks to cluster pixels into (default: 8)",
    )
    parser.add_argument(
        "-p", "--padding",
        type=int,
        default=None,
        help="How much padding to add between the circles (default: 2)",
    )
    parser.add_argument(
        "-r", "--radius",
        type=int,
        default=None,
        help="Maximum radius of the circles (default: 8)",
    )
    parser.add_argument(
        "-d", "--delay",
        type=int,
        default=None,
        help="Delay of the frames in the output GIF, in 1/100 s (default: 5)",
    )
    parser.add_argument(
        "-k", "--key",
        choices=sorted(KEY_FUNCTIONS),
        default=None,
        help="Pixel key driving the circle radius (default: brightness)",
    )
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to a pointillist.yaml config file",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    """
    Merge command-line values over config file and environment values.

    Raises:
        ValueError: If a numeric environment variable is not an integer
        pydantic.ValidationError: If a merged value is out of range
    """
    settings = load_config(args.config)

    overrides = {
        "block_size": args.block_size,
        "padding": args.padding,
        "radius": args.radius,
        "delay": args.delay,
        "key": args.key,
    }
    pipeline = settings.pipeline.model_dump()
    pipeline.update({name: value for name, value in overrides.items() if value is not None})

    data = settings.model_dump()
    data["pipeline"] = pipeline
    if args.log_level:
        data["logging"]["level"] = args.log_level

    return Settings.model_validate(data)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the converter. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = resolve_settings(args)
    except ValidationError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: invalid configuration:\n{e}", file=sys.stderr)
        return EXIT_USAGE
    except ValueError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: invalid configuration: {e}", file=sys.stderr)
        return EXIT_USAGE
    except OSError as e:
        print(f"{parser.prog}: error: cannot read config: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(settings)

    try:
        result = run_pipeline(args.in_path, args.out_path, settings.pipeline)
    except (PointillistError, OSError) as e:
        logger.error(f"Conversion failed: {e}")
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    print(
        f"Wrote {result.frame_count} frame(s) "
        f"({result.canvas_size[0]}x{result.canvas_size[1]}) to {args.out_path}"
    )
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
