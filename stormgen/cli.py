# File: stormgen/cli.py
"""
stormgen - Command-Line Interface
==================================

Validates the entity declarations in a JSON/YAML file and prints a
report.  Built with the standard-library ``argparse`` module.

Usage examples::

    stormgen -d entities.yaml
    stormgen -d entities.json -vv --workers 4
    python -m stormgen -d entities.yaml --quiet

Exit codes:
    0: every entity is valid
    1: at least one entity has validation errors
    4: input/argument error (missing file, malformed declarations)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("stormgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the stormgen logger based on verbosity level.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    root_logger: logging.Logger = logging.getLogger("stormgen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from stormgen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="stormgen",
        description=(
            "stormgen: validate persistent entity declarations and build "
            "the models a DAO code generator consumes."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -d entities.yaml\n"
            "  %(prog)s -d entities.json -vv --workers 4\n"
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"stormgen v{__version__}",
    )
    parser.add_argument(
        "-d", "--declarations",
        type=str,
        required=True,
        metavar="PATH",
        help="Path to the entity declaration file (JSON or YAML).",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        metavar="N",
        help="Build entities on N threads (default: 1).",
    )

    output_group = parser.add_argument_group("output")
    verbosity = output_group.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v INFO, -vv DEBUG).",
    )
    verbosity.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all log output.",
    )
    return parser


# ---------------------------------------------------------------------------
# Validation run
# ---------------------------------------------------------------------------


def _run(path: Path, workers: int) -> int:
    """Load, build and report.  Returns the exit code."""
    from stormgen.databases import ConfigurationError
    from stormgen.processor import EntityProcessor

    try:
        processor: EntityProcessor = EntityProcessor.from_file(path)
    except (FileNotFoundError, ValueError) as exc:
        # ConfigurationError is a ValueError
        kind: str = "configuration" if isinstance(exc, ConfigurationError) else "declarations"
        logger.error("Failed to load %s: %s", kind, exc)
        return EXIT_INPUT_ERROR

    report = processor.process_all(max_workers=max(1, workers))
    print(report.summary())
    return EXIT_SUCCESS if report.success else EXIT_VALIDATION_ERROR


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.quiet:
        verbosity: int = -1
        logging.disable(logging.CRITICAL)
    else:
        verbosity = args.verbose

    _setup_logging(verbosity)

    path: Path = Path(args.declarations).resolve()
    if not path.is_file():
        logger.error("Declaration file not found: %s", path)
        sys.exit(EXIT_INPUT_ERROR)

    logger.info("Declarations: %s", path)
    exit_code: int = _run(path, args.workers)

    if exit_code != EXIT_SUCCESS:
        logger.error("Validation failed with exit code %d.", exit_code)
    sys.exit(exit_code)


def main() -> NoReturn:
    cli_main()


__all__: List[str] = [
    "cli_main",
    "main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_INPUT_ERROR",
]
