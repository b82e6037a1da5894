# log.py
# SPDX-License-Identifier: MIT
"""Package-wide logging helpers for licensescan.

The package logger carries a NullHandler so that importing the engine from a
host application never prints "no handler" warnings. Scans log per-file
decisions at DEBUG and a one-line summary at INFO.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager

__all__ = [
    "PACKAGE_LOGGER_NAME",
    "get_logger",
    "configure_logging",
    "temp_level",
]

PACKAGE_LOGGER_NAME = "licensescan"

logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger scoped to licensescan.

    Args:
        name (str | None): Fully qualified logger name. Defaults to the
            package logger when omitted.

    Returns:
        logging.Logger: Logger instance for the requested name.
    """
    return logging.getLogger(name or PACKAGE_LOGGER_NAME)


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream=None,
    fmt: str | None = None,
    datefmt: str | None = None,
    propagate: bool | None = None,
    logger_name: str = PACKAGE_LOGGER_NAME,
) -> logging.Logger:
    """Attach a single stream handler to a licensescan logger.

    Calling this repeatedly does not stack handlers; an existing stream
    handler whose stream has been closed is pointed at the new stream.

    Args:
        level (int | str): Logging level or level name.
        stream (IO[str] | None): Target stream; defaults to sys.stderr.
        fmt (str | None): Log format string.
        datefmt (str | None): Date format string for the handler.
        propagate (bool | None): Whether records bubble up to ancestor
            loggers. None keeps propagation on so pytest's caplog sees them.
        logger_name (str): Logger to configure.

    Returns:
        logging.Logger: The configured logger.
    """
    logger = get_logger(logger_name or PACKAGE_LOGGER_NAME)
    logger.setLevel(_coerce_level(level))
    logger.propagate = True if propagate is None else bool(propagate)

    if stream is None:
        stream = sys.stderr
    if fmt is None:
        fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    has_stream = False
    for handler in logger.handlers:
        if not isinstance(handler, logging.StreamHandler):
            continue
        has_stream = True
        if getattr(getattr(handler, "stream", None), "closed", False):
            handler.stream = stream
    if not has_stream:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
        logger.addHandler(handler)

    return logger


@contextmanager
def temp_level(level: int | str, name: str | None = None):
    """Temporarily set a logger level inside a ``with`` block."""
    logger = get_logger(name or PACKAGE_LOGGER_NAME)
    old = logger.level
    logger.setLevel(_coerce_level(level))
    try:
        yield logger
    finally:
        logger.setLevel(old)
