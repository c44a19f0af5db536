"""Logging configuration for the voicedrill command line."""

import logging
import sys

PACKAGE_LOGGER = "voicedrill"


class KeyValueFormatter(logging.Formatter):
    """Formats records as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        fields = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            fields["exception"] = self.formatException(record.exc_info)
        return " ".join(f"{k}={v}" for k, v in fields.items())


def setup_logging(verbose: bool = False) -> None:
    """
    Attach a stderr handler to the package logger.

    WARNING and above by default, DEBUG when *verbose*. Calling it again
    replaces the handler instead of stacking another one.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(KeyValueFormatter(datefmt="%Y-%m-%dT%H:%M:%S"))
    logger.addHandler(handler)
    logger.propagate = False
