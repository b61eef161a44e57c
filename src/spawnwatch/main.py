"""Entry-point for launching the CLI application."""
from __future__ import annotations

import argparse
import logging
from typing import Sequence

from .presentation.cli.app import main as cli_main

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Track respawn windows per channel.")
    parser.add_argument(
        "--log-level",
        default="warning",
        type=str.lower,
        choices=LOG_LEVELS,
        help="Logging level (default: warning)",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    """Run the CLI presentation layer."""
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="[%(asctime)s] %(levelname)s %(message)s")
    cli_main()


if __name__ == "__main__":
    main()
