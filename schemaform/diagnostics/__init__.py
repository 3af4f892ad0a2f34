"""Diagnostic sinks for non-fatal, fail-open conditions."""

from .lib import (
    Diagnostic,
    DiagnosticSink,
    LoggingDiagnosticSink,
    RecordingDiagnosticSink,
    default_sink,
)

__all__ = [
    "Diagnostic",
    "DiagnosticSink",
    "LoggingDiagnosticSink",
    "RecordingDiagnosticSink",
    "default_sink",
]
