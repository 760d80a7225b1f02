"""Command line entry point: print the checksum of one APK."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .checksum import compute_checksum_file
from .config import ConfigLoader
from .errors import ApkChecksumError, ConfigurationError
from .logging import setup_logging, LogContext
from .logging_config import LoggingConfig

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apk-checksum",
        usage="%(prog)s [options] [path to apk file]",
        description="Compute the checksum of the native libraries and dex code in an APK"
    )
    # Collected as a list so a wrong count is reported the same way for
    # zero and for several paths.
    parser.add_argument(
        "apk",
        nargs="*",
        type=Path,
        help="Path to the APK file"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a TOML config file"
    )
    parser.add_argument(
        "--log-level",
        help="Log level (overrides config)"
    )
    parser.add_argument(
        "--log-format",
        help="Log format: simple, detailed or json (overrides config)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log walker and folding details to stderr"
    )
    return parser


def checksum_command(apk_path: Path) -> int:
    """Compute and print the checksum of one APK.

    Args:
        apk_path: Path to the APK

    Returns:
        Exit code (0 for success)
    """
    logger = logging.getLogger(__package__ or __name__)

    with LogContext(apk=str(apk_path)):
        try:
            result = compute_checksum_file(apk_path)
        except ApkChecksumError as e:
            logger.error(e.message)
            return EXIT_FAILURE

        logger.info(
            f"Checksum complete: {{'entries': {result.entries_seen}, "
            f"'folded': {result.entries_folded}, 'bytes': {result.bytes_folded}}}"
        )

    sys.stdout.write(result.format())
    sys.stdout.flush()
    return EXIT_OK


def _configure_logging(args: argparse.Namespace) -> None:
    """Apply config sources, then command line overrides, and install handlers.

    Raises:
        ConfigurationError: For a bad --config file or logging option
    """
    config = ConfigLoader().load(config_path=args.config)
    overrides = {}
    if args.log_level:
        overrides["level"] = args.log_level
    if args.log_format:
        overrides["format"] = args.log_format
    if args.debug:
        overrides["level"] = "DEBUG"

    try:
        logging_config = LoggingConfig.model_validate(
            {**config.logging.model_dump(), **overrides}
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid logging option: {e}") from e

    setup_logging(logging_config)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the apk-checksum command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if len(args.apk) != 1:
        parser.print_usage(sys.stderr)
        print("\nError: Cannot take the checksum without an APK.", file=sys.stderr)
        return EXIT_USAGE

    try:
        _configure_logging(args)
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_FAILURE

    return checksum_command(args.apk[0])


if __name__ == "__main__":
    sys.exit(main())
