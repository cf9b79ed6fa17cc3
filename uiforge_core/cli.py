#!/usr/bin/env python3
"""
uiforge CLI - run one natural-language command against the UI builder

Usage:
    uiforge "Create a login form with email and password, then make it dark themed"
    uiforge            # runs the built-in default command
"""

import argparse
import asyncio
import sys

from .config import config
from .diagnostics import get_logger
from .runner import run_command

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uiforge",
        description="Drive an AI UI builder from a natural-language command",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default=None,
        help="Natural-language command (default: built-in demo command)",
    )
    return parser


def main(argv=None) -> int:
    """Main CLI entry point"""
    args = build_parser().parse_args(argv)
    command = args.command or config.default_command

    try:
        result = asyncio.run(run_command(command))
    except Exception as e:
        logger.error(f"Run failed: {e}")
        return 1

    if result.final_code:
        print(result.final_code)
    else:
        print("No code was extracted.", file=sys.stderr)
    logger.info(f"Artifacts in: {result.run_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
