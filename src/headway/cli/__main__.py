"""CLI entry point for headway.

Usage:
    python -m headway.cli demo
    python -m headway.cli demo --size 542MiB --show-speed --show-time-left
    python -m headway.cli demo --duration 5 --postfix "Fake download"
"""

from __future__ import annotations

import argparse
import logging
import sys

from headway.config import get_settings


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="headway",
        description="Progress tracking command-line tools",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.log_level,
        help=f"Logging level (default: {settings.log_level})",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Demo command
    demo_parser = subparsers.add_parser(
        "demo",
        help="Simulate a download with a live progress bar",
    )
    demo_parser.add_argument(
        "--size",
        type=str,
        default="542MiB",
        help="Simulated download size, e.g. 542MiB, 2GiB, 1024 (default: 542MiB)",
    )
    demo_parser.add_argument(
        "--duration",
        type=float,
        default=8.0,
        help="Approximate duration of the simulation in seconds (default: 8)",
    )
    demo_parser.add_argument(
        "--show-speed",
        action="store_true",
        default=settings.show_speed,
        help="Show bandwidth",
    )
    demo_parser.add_argument(
        "--show-time-left",
        action="store_true",
        default=settings.show_time_left,
        help="Show estimated time left",
    )
    demo_parser.add_argument(
        "--prefix",
        type=str,
        default="",
        help="Text shown before the bar",
    )
    demo_parser.add_argument(
        "--postfix",
        type=str,
        default="Fake download",
        help="Text shown after the bar (default: Fake download)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "demo":
        from headway.cli.demo import parse_size, run_demo

        try:
            size = parse_size(args.size)
        except ValueError as e:
            parser.error(str(e))

        return run_demo(
            size=size,
            duration=args.duration,
            show_speed=args.show_speed,
            show_time_left=args.show_time_left,
            prefix=args.prefix,
            postfix=args.postfix,
        )
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
