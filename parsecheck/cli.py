"""CLI entrypoint for parsecheck."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import CONFIG_FILENAME, ConfigError, load_config
from .harness import Harness
from .logging import configure_logging, get_logger
from .parser import ParseCancelled, ParseContext
from .tree import InspectionError

logger = get_logger("cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parsecheck",
        description="Parse every TypeScript source under a directory and report outcome counts.",
    )
    parser.add_argument(
        "root",
        help="Directory to scan for source files.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .parsecheck.yml file (defaults to one in the scanned root).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Abort the run after this many seconds.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log output to this file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for parsecheck."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.config is not None and not args.config.exists():
        parser.exit(1, f"Config file not found: {args.config}\n")
    config_path = args.config if args.config is not None else Path(args.root) / CONFIG_FILENAME
    try:
        config = load_config(config_path)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    ctx = ParseContext.with_timeout(args.timeout) if args.timeout else ParseContext.background()
    harness = Harness(config)

    try:
        harness.run(args.root, ctx)
    except OSError as exc:
        print(exc)
        parser.exit(1)
    except ParseCancelled as exc:
        parser.exit(1, f"parsecheck aborted: {exc}\n")
    except InspectionError as exc:
        print(exc)
        parser.exit(1)
    logger.debug("Run complete for %s", args.root)


if __name__ == "__main__":
    main(sys.argv[1:])
