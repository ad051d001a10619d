"""Logging for Budgetr.

CLI output goes through the "budgetr" logger: INFO lines are the command's
normal output on stdout, warnings and errors go to stderr, and everything at
the configured level is also written to a per-day file under the log dir.
"""

import logging
import sys
from datetime import date

from config import Config

LOGGER_NAME = "budgetr"


class _MaxLevelFilter(logging.Filter):
    """Pass only records below a level."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def _file_handler(config: Config) -> logging.Handler:
    config.log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(config.log_dir / f"budgetr-{date.today().isoformat()}.log")
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    return handler


def _console_handlers() -> list:
    out = logging.StreamHandler(sys.stdout)
    out.addFilter(_MaxLevelFilter(logging.WARNING))
    out.setFormatter(logging.Formatter("%(message)s"))

    err = logging.StreamHandler(sys.stderr)
    err.setLevel(logging.WARNING)
    err.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    return [out, err]


def setup_logging(config: Config) -> logging.Logger:
    """Configure the budgetr logger from config.

    Safe to call more than once; earlier handlers are replaced.

    Args:
        config: Application configuration containing log settings.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)
    logger.handlers.clear()
    logger.propagate = False

    logger.addHandler(_file_handler(config))
    for handler in _console_handlers():
        logger.addHandler(handler)

    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)
