"""Logging configuration for the migration toolkit."""

from __future__ import annotations

import logging
import os
import sys
import time
from typing import Any


def setup_logging(level: int | str | None = None) -> logging.Logger:
    """Configure and return the toolkit logger."""
    logger = logging.getLogger("firemigrate")

    if logger.handlers:
        return logger

    if level is None:
        level = os.environ.get("LOG_LEVEL", "INFO").upper()

    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str = "firemigrate") -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)


class LogContext:
    """
    Log the start, completion or failure of one migration phase.

    Context values are appended to every line as key=value pairs, and the
    completion or failure line reports the elapsed seconds.
    """

    def __init__(self, logger: logging.Logger, operation: str, **context: Any) -> None:
        self.logger = logger
        self.operation = operation
        self.context = context
        self.started: float | None = None

    @property
    def suffix(self) -> str:
        if not self.context:
            return ""
        return " [" + ", ".join(f"{key}={value}" for key, value in self.context.items()) + "]"

    def elapsed(self) -> float:
        if self.started is None:
            return 0.0
        return time.monotonic() - self.started

    def __enter__(self) -> "LogContext":
        self.started = time.monotonic()
        self.logger.info(f"Starting {self.operation}{self.suffix}")
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: Any) -> bool:
        if exc_type is not None:
            self.logger.error(
                f"Failed {self.operation} after {self.elapsed():.1f}s: {exc_val}{self.suffix}",
                exc_info=True,
            )
        else:
            self.logger.info(f"Completed {self.operation} in {self.elapsed():.1f}s{self.suffix}")
        return False


# Initialize default logger
logger = setup_logging()
