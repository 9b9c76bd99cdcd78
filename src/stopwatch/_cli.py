"""Stopwatch CLI — record event timestamps and print them as CSV.

Entry point for the ``stopwatch`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from stopwatch._errors import ConfigError, ReportError


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the stopwatch CLI."""
    parser = argparse.ArgumentParser(
        prog="stopwatch",
        description=(
            "Collect timestamps of events and report them as CSV. "
            "Press <enter> to record an event, <ctrl+d> or <ctrl+c> to finish."
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        help='Output file path (default: stdout). Values "" and "-" mean stdout',
    )
    parser.add_argument("-c", "--comment", default=None, help="Comment for the output file")
    parser.add_argument(
        "--utc",
        action="store_true",
        default=None,
        help="Record timestamps in UTC instead of local time",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=None,
        help="Do not print status messages on stderr",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Config file (default: stopwatch.yaml/.yml/.toml in the working directory)",
    )
    return parser


def _get_version() -> str:
    """Get the package version."""
    from stopwatch import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    from stopwatch.config_loader import load_config
    from stopwatch.session import record
    from stopwatch.status import StatusReporter

    try:
        config = load_config(
            path=args.config,
            output=args.output,
            comment=args.comment,
            utc=args.utc,
            quiet=args.quiet,
        )
    except ConfigError as exc:
        StatusReporter().error(str(exc))
        sys.exit(2)

    try:
        record(config)
    except ReportError as exc:
        StatusReporter().error(f"problem writing CSV: {exc}")
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
