"""Command-line entry point: turn a chat transcript into meeting minutes."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from src.config import settings
from src.minutes.pipeline import build_minutes, render_minutes
from src.pipeline_config import OutputFormat, PipelineConfig, UnknownPolicy

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Send log records to stderr so stdout carries only the report."""
    logging.basicConfig(
        level=level.upper(),
        format="[%(asctime)s] [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meeting-minutes",
        description="Build meeting minutes from a tab-separated chat transcript.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Transcript file to read (default: standard input).",
    )
    parser.add_argument(
        "--non",
        dest="include_non_commands",
        action="store_true",
        default=settings.include_non_commands,
        help="Include the dump of non-command lines.",
    )
    parser.add_argument(
        "--strict",
        action=argparse.BooleanOptionalAction,
        default=settings.unknown_policy is UnknownPolicy.STRICT,
        help="File every unrecognised line under unknown commands.",
    )
    parser.add_argument(
        "--sort-attendees",
        action=argparse.BooleanOptionalAction,
        default=settings.sort_attendees,
        help="Sort the attendance list by name.",
    )
    parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.MARKDOWN.value,
    )
    parser.add_argument("--log-level", default=settings.log_level)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    config = PipelineConfig(
        unknown_policy=UnknownPolicy.STRICT if args.strict else UnknownPolicy.MARKER,
        include_non_commands=args.include_non_commands,
        sort_attendees=args.sort_attendees,
    )

    try:
        if args.path is None:
            report = build_minutes(sys.stdin, config)
        else:
            with open(args.path, encoding="utf-8") as f:
                report = build_minutes(f, config)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Could not read transcript: %s", exc)
        return 1

    sys.stdout.write(
        render_minutes(report, args.format, include_non_commands=config.include_non_commands)
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
