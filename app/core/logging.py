"""
Logging setup for the calendar proxy service.

Tokens and authorization codes must never reach a log record; log the
operation and the upstream status instead.
"""

import logging
import sys

_NOISY_LOGGERS = ("googleapiclient.discovery_cache", "httpx")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a pipe-delimited format on stdout."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["configure_logging"]
