from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .config import Settings
from .models import Invocation
from .pipeline.wrapped_run import run_wrapped


def _non_negative(value: str) -> int:
    lines = int(value)
    if lines < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return lines


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="docker-boom",
        description=(
            "Run a command, stream its output and post the last lines of "
            "stdout/stderr to Slack when it fails."
        ),
    )
    parser.add_argument(
        "--lines",
        type=_non_negative,
        default=None,
        help="Number of trailing lines kept per stream (default: DOCKER_BOOM_LINES or 15).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Channel config file (default: DOCKER_BOOM_CONFIG or .docker-boom.json).",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Command to run, followed by its arguments.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    command = args.command
    if command[:1] == ["--"]:
        command = command[1:]

    invocation = Invocation.from_argv(command)
    if invocation is None:
        return 0

    settings = Settings.from_env()
    if args.lines is not None:
        settings = replace(settings, lines=args.lines)
    if args.config is not None:
        settings = replace(settings, config_file=args.config)

    result = run_wrapped(settings, invocation)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
