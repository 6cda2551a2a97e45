"""Structured logging configuration.

This module initializes a logger with a stable structured format.
Log lines go to stderr so containers written to stdout stay intact.
"""

from __future__ import annotations

import sys
from typing import Any

import structlog


class _StderrProxy:
    """File-like object that resolves ``sys.stderr`` on every write."""

    def write(self, message: str) -> int:
        return sys.stderr.write(message)

    def flush(self) -> None:
        sys.stderr.flush()


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured JSON output.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.PrintLoggerFactory(file=_StderrProxy()),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger(name)
