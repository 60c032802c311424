from __future__ import annotations

import argparse
import logging

from maxdirsize import __version__
from maxdirsize.dirsizeconfig import DirSizeConfig
from maxdirsize.dirsizeconfig import write_new_config
from maxdirsize.dirsizeguard import DirSizeGuard

APP_NAME = "maxdirsize"
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(APP_NAME)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Keep a directory under a size limit by deleting its oldest files.",
        epilog="Settings come from the environment: DIRECTORY, INTERVAL_SECONDS, "
        "MAX_SIZE_MB, MARGIN, COUNT_FAILED_DELETIONS.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Optional configuration file. Environment variables override it.",
    )
    parser.add_argument(
        "--once",
        help="Run a single cleanup and exit. Default: False (loop until exit).",
        default=False,
        action="store_true",
    )
    parser.add_argument(
        "--debug",
        help="Enable debug logging.",
        default=False,
        action="store_true",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write the log to this file.",
    )
    parser.add_argument(
        "--make-config",
        type=str,
        default=None,
        metavar="PATH",
        help="Write a default configuration file to PATH and exit.",
    )
    return parser.parse_args(args)


def add_file_handler_to_logging(log_filepath: str) -> None:
    """Add a file handler to the root logger."""
    file_handler = logging.FileHandler(log_filepath)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logging.getLogger().addHandler(file_handler)


def main(*, cli_args: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(cli_args)

    if args.make_config:
        write_new_config(args.make_config)
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )

    if args.log_file:
        add_file_handler_to_logging(args.log_file)

    try:
        config = DirSizeConfig(args.config)

    except ValueError as error:
        logger.error("Invalid configuration: %s", error)
        return 1

    logger.info(
        "Starting %s-v%s and running every %s seconds on %s with a limit of %s MB",
        APP_NAME,
        __version__,
        config.interval_seconds,
        config.directory,
        config.max_size_mb,
    )

    guard = DirSizeGuard(config)

    if args.once:
        guard.run_once()

    else:
        guard.run_loop()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
