# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_desmos

import argparse
import sys
from typing import Sequence

import anyio

from coreason_desmos.config import DriverConfig
from coreason_desmos.driver import run_program
from coreason_desmos.exceptions import DriverError
from coreason_desmos.loader import load_state
from coreason_desmos.utils.logger import logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coreason-desmos",
        description="Run a compiled Desmos program state, feeding it stdin and printing its stdout.",
    )
    parser.add_argument("state", nargs="?", help="Path to the program state JSON document")
    parser.add_argument(
        "--executable-path",
        help="Browser executable override (default: CHROME_EXECUTABLE_PATH or Playwright's browser)",
    )
    parser.add_argument("--headful", action="store_true", help="Show the browser window")
    parser.add_argument("--timeout", type=float, help="Give up if the program has not halted after this many seconds")
    parser.add_argument("--url", help="Calculator page to load")
    return parser


def build_config(args: argparse.Namespace) -> DriverConfig:
    overrides: dict[str, object] = {}
    if args.executable_path:
        overrides["chrome_executable_path"] = args.executable_path
    if args.headful:
        overrides["headless"] = False
    if args.timeout is not None:
        overrides["execution_timeout"] = args.timeout
    if args.url:
        overrides["calculator_url"] = args.url
    return DriverConfig(**overrides)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the command line driver."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
        state = load_state(args.state)
        data = sys.stdin.buffer.read()
        result = anyio.run(run_program, state, data, config)
    except DriverError as e:
        if not args.state:
            parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return 1

    sys.stdout.buffer.write(result.stdout)
    sys.stdout.buffer.flush()
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
