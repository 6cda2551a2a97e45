"""Diagnostic sinks for materialization warnings.

This module defines the sink contract passed into materializer entry
points, plus a logger-backed sink and an in-memory collecting sink.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

from core.logging_config import get_logger


class DiagnosticSink(Protocol):
    """Receiver of structured warning and error diagnostics."""

    def warning(self, event: str, **fields: object) -> None:
        """Report a non-fatal problem."""

    def error(self, event: str, **fields: object) -> None:
        """Report a problem that ended ingestion early."""


class LoggingDiagnosticSink:
    """Sink that forwards diagnostics to a structured logger."""

    def __init__(self, logger: Any | None = None) -> None:
        self._logger = logger if logger is not None else get_logger("strata.diagnostics")

    def warning(self, event: str, **fields: object) -> None:
        self._logger.warning(event, **fields)

    def error(self, event: str, **fields: object) -> None:
        self._logger.error(event, **fields)


@dataclass(frozen=True)
class Diagnostic:
    """One captured diagnostic.

    Attributes:
        level: ``warning`` or ``error``.
        event: Event name.
        fields: Structured event fields.
    """

    level: str
    event: str
    fields: Mapping[str, object] = field(default_factory=dict)


class CollectingDiagnosticSink:
    """Sink that keeps diagnostics in memory for inspection."""

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def warning(self, event: str, **fields: object) -> None:
        self.diagnostics.append(Diagnostic(level="warning", event=event, fields=fields))

    def error(self, event: str, **fields: object) -> None:
        self.diagnostics.append(Diagnostic(level="error", event=event, fields=fields))

    def events(self) -> list[str]:
        """Return captured event names in report order."""
        return [diagnostic.event for diagnostic in self.diagnostics]


class CountingDiagnosticSink:
    """Sink wrapper that counts diagnostics before forwarding them."""

    def __init__(self, inner: DiagnosticSink) -> None:
        self._inner = inner
        self.warning_count = 0
        self.error_count = 0

    def warning(self, event: str, **fields: object) -> None:
        self.warning_count += 1
        self._inner.warning(event, **fields)

    def error(self, event: str, **fields: object) -> None:
        self.error_count += 1
        self._inner.error(event, **fields)
