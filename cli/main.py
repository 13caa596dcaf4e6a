"""CLI entry point: interactive prompt, or one command given on the command line."""

import argparse
import os
import shlex
import sys
from typing import List, Optional

from common.logging_config import setup_logging
from cli.commands import get_client
from cli.parser import ParseError
from cli.repl import repl_loop, run_line


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="probe",
        description="Measure upload and download throughput against probe gateways.",
    )
    parser.add_argument("--debug", action="store_true", help="log at DEBUG level")
    parser.add_argument(
        "--target",
        action="append",
        metavar="URL",
        help="gateway base URL for this run only; repeat to add fallbacks",
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="run one command and exit (e.g. 'download 5'); starts the prompt when omitted",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the probe CLI.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])

    Returns:
        Process exit code: 0 on success, 2 when the command does not parse
    """
    args = build_arg_parser().parse_args(argv)
    logger = setup_logging('cli', log_level='DEBUG' if args.debug else os.getenv('LOG_LEVEL', 'WARNING'))

    if args.target:
        get_client().config.set_targets(args.target, persist=False)
        logger.info(f"Using targets for this run: {args.target}")

    if not args.command:
        repl_loop()
        return 0

    line = shlex.join(args.command)
    logger.debug(f"Running one-shot command: {line}")
    try:
        print(run_line(line))
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
