"""Injectable sink for non-fatal diagnostics.

Fail-open condition evaluation and other recoverable malformed-input
situations report here instead of writing to a global console, so callers
can route them to logging and tests can assert on them.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    """A structured non-fatal warning.

    Attributes:
        code: Machine-readable classification (e.g. "unknown-op").
        message: Human-readable description.
        details: Extra structured context such as the offending condition.
    """

    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)


class DiagnosticSink(Protocol):
    """Receiver for non-fatal diagnostics."""

    def emit(self, diagnostic: Diagnostic) -> None:
        """Record a diagnostic."""
        ...


class LoggingDiagnosticSink:
    """Default sink that forwards diagnostics to the logging system."""

    def __init__(self, log: logging.Logger | None = None):
        self._logger = log or logger

    def emit(self, diagnostic: Diagnostic) -> None:
        self._logger.warning(
            "[%s] %s %s", diagnostic.code, diagnostic.message, diagnostic.details
        )


class RecordingDiagnosticSink:
    """In-memory sink that keeps every diagnostic it receives.

    Example:
        >>> sink = RecordingDiagnosticSink()
        >>> evaluate_condition({"op": "bogus"}, ctx, sink)
        True
        >>> sink.codes
        ['unknown-op']
    """

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def emit(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    @property
    def codes(self) -> list[str]:
        return [d.code for d in self.diagnostics]

    def clear(self) -> None:
        self.diagnostics.clear()


_default_sink = LoggingDiagnosticSink()


def default_sink() -> DiagnosticSink:
    """Return the process-wide logging sink used when none is injected."""
    return _default_sink


__all__ = [
    "Diagnostic",
    "DiagnosticSink",
    "LoggingDiagnosticSink",
    "RecordingDiagnosticSink",
    "default_sink",
]
