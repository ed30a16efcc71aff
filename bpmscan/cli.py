"""Command-line entry point: ``python -m bpmscan [DIRECTORY]``.

Without an argument the ``test`` folder under the current working
directory is scanned. Pipeline constants come from ``BPMSCAN_*``
environment variables (see ``bpmscan.config``).
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from .batch import BatchRunner
from .config import TempoConfig
from .sink import ConsoleSink

logger = logging.getLogger("bpmscan.cli")


def _configure_logging() -> None:
    level_name = (os.getenv("BPMSCAN_LOG_LEVEL") or "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="bpmscan",
        description="Estimate the tempo of every .wav/.mp3 file in a directory",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=os.path.join(os.getcwd(), "test"),
        help="folder to scan (default: ./test)",
    )
    args = parser.parse_args(argv)

    _configure_logging()

    try:
        config = TempoConfig.from_env()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    runner = BatchRunner(config=config, sink=ConsoleSink())
    try:
        results = runner.run(args.directory)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    failed = sum(1 for r in results if not r.ok)
    logger.info("[CLI] %d files processed, %d failed", len(results), failed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
