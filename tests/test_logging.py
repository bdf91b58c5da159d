"""Tests for risklab logging and parameter clamping."""

import json
import logging

import pytest

from risklab.logging_setup import (
    JSONFormatter,
    SimpleFormatter,
    get_logger,
    reset_logging,
    setup_logging,
)
from risklab.validation import clamp_count, clamp_param


def _record(msg: str, args: tuple = (), level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=args,
        exc_info=None,
    )


class TestJSONFormatter:
    """Tests for JSON formatter."""

    def test_format_basic_message(self) -> None:
        """Records become flat JSON objects."""
        data = json.loads(JSONFormatter().format(_record("Test message")))

        assert "timestamp" in data
        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert data["message"] == "Test message"

    def test_format_with_args(self) -> None:
        """%-style arguments are interpolated."""
        data = json.loads(JSONFormatter().format(_record("Value is %d", (42,), logging.WARNING)))

        assert data["message"] == "Value is 42"

    def test_extra_fields_merged(self) -> None:
        """Structured extras land at the top level."""
        record = _record("clamped")
        record.extra_fields = {"param": "win_rate", "clamped": 1.0}

        data = json.loads(JSONFormatter().format(record))

        assert data["param"] == "win_rate"
        assert data["clamped"] == 1.0


class TestSimpleFormatter:
    """Tests for simple formatter."""

    def test_format_includes_level(self) -> None:
        """Plain lines carry level, logger and message."""
        output = SimpleFormatter().format(_record("Test message"))

        assert "INFO" in output
        assert "test" in output
        assert "Test message" in output


class TestLoggingSetup:
    """Tests for logging setup functions."""

    def test_setup_logging_creates_handler(self) -> None:
        """The package logger gets a stderr handler."""
        reset_logging()
        setup_logging(level="DEBUG")

        assert len(logging.getLogger("risklab").handlers) > 0

    def test_setup_logging_only_once(self) -> None:
        """Repeat calls do not stack handlers."""
        reset_logging()
        setup_logging()
        handler_count = len(logging.getLogger("risklab").handlers)

        setup_logging()
        assert len(logging.getLogger("risklab").handlers) == handler_count

    def test_simple_format_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """LOG_FORMAT=simple selects the human-readable formatter."""
        monkeypatch.setenv("LOG_FORMAT", "simple")
        reset_logging()
        setup_logging()

        handler = logging.getLogger("risklab").handlers[0]
        assert isinstance(handler.formatter, SimpleFormatter)

    def test_json_format_and_unknown_level(self) -> None:
        """json selects JSON lines; an unknown level name means INFO."""
        reset_logging()
        setup_logging(level="chatty", format_type="json")

        package_logger = logging.getLogger("risklab")
        assert package_logger.level == logging.INFO
        assert isinstance(package_logger.handlers[0].formatter, JSONFormatter)

    def test_get_logger_returns_child(self) -> None:
        """Short names become risklab children."""
        assert get_logger("engine.trailing_stop").name == "risklab.engine.trailing_stop"

    def test_get_logger_handles_prefixed_name(self) -> None:
        """Full names are used as given."""
        assert get_logger("risklab.cli.main").name == "risklab.cli.main"

    def test_reset_logging(self) -> None:
        """Reset drops the handler."""
        setup_logging()
        reset_logging()

        assert len(logging.getLogger("risklab").handlers) == 0


class TestClamping:
    """Tests for parameter clamping."""

    def test_in_range_unchanged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Valid values pass through silently."""
        assert clamp_param("x", 0.5, lower=0.0, upper=1.0) == 0.5
        assert caplog.text == ""

    def test_clamped_and_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Out-of-range values are clamped with a warning."""
        with caplog.at_level(logging.WARNING, logger="risklab"):
            assert clamp_param("fixed_distance", -2.0, lower=0.0) == 0.0

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.extra_fields["param"] == "fixed_distance"

    def test_non_finite(self) -> None:
        """NaN and inf use the default, then the bounds."""
        assert clamp_param("x", float("nan"), lower=0.0, upper=1.0, default=0.5) == 0.5
        assert clamp_param("x", float("inf"), lower=0.0) == 0.0
        assert clamp_param("x", float("nan")) == 0.0

    def test_count(self) -> None:
        """Counts are floored at the minimum."""
        assert clamp_count("n", 0) == 1
        assert clamp_count("n", 5) == 5
