"""Tests for diagnostic sinks."""

import logging

import pytest

from .lib import Diagnostic, LoggingDiagnosticSink, RecordingDiagnosticSink


class TestRecordingSink:
    """Tests for the in-memory sink."""

    @pytest.mark.unit
    def test_records_in_order(self):
        """Diagnostics are kept in emission order."""
        sink = RecordingDiagnosticSink()
        sink.emit(Diagnostic(code="a", message="first"))
        sink.emit(Diagnostic(code="b", message="second"))
        assert sink.codes == ["a", "b"]

    @pytest.mark.unit
    def test_clear(self):
        """Clear empties the record."""
        sink = RecordingDiagnosticSink()
        sink.emit(Diagnostic(code="a", message="first"))
        sink.clear()
        assert sink.diagnostics == []


class TestLoggingSink:
    """Tests for the logging sink."""

    @pytest.mark.unit
    def test_emits_warning(self, caplog):
        """Diagnostics are logged at WARNING level."""
        sink = LoggingDiagnosticSink(logging.getLogger("schemaform.test"))
        with caplog.at_level(logging.WARNING, logger="schemaform.test"):
            sink.emit(Diagnostic(code="unknown-op", message="Unsupported op"))
        assert "unknown-op" in caplog.text
        assert "Unsupported op" in caplog.text
