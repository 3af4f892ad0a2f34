"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import LOG_FORMAT, get_logger, setup_logging


@pytest.fixture
def basic_config_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    return calls


class TestGetLogger:
    @pytest.mark.unit
    def test_named(self) -> None:
        logger = get_logger("cli")
        assert logger.name == "cli"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_package_default(self) -> None:
        assert get_logger().name == "schemaform"


class TestSetupLogging:
    """setup_logging resolves levels before delegating to basicConfig."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "level,expected",
        [
            (logging.WARNING, logging.WARNING),
            ("debug", logging.DEBUG),
            ("ERROR", logging.ERROR),
            ("chatty", logging.INFO),
        ],
    )
    def test_level_resolution(self, basic_config_calls, level, expected) -> None:
        setup_logging(level=level)
        assert basic_config_calls[-1]["level"] == expected

    @pytest.mark.unit
    def test_stream_and_format(self, basic_config_calls) -> None:
        stream = StringIO()
        setup_logging(stream=stream)
        assert basic_config_calls[-1]["stream"] is stream
        assert basic_config_calls[-1]["format"] == LOG_FORMAT
