"""Logging for the risklab engines and CLI.

Everything logs under the ``risklab`` logger. Handlers write to stderr, so the
CLI's JSON and CSV output on stdout stays parseable. ``LOG_FORMAT=json`` turns
each record into one JSON object per line; clamp warnings carry the offending
parameter in their ``extra_fields``.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from risklab.config import get_config


class JSONFormatter(logging.Formatter):
    """One JSON object per record, merged with any ``extra_fields``."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Parameter clamps attach the offending value here
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data)


class SimpleFormatter(logging.Formatter):
    """``time | level | logger | message`` lines for terminals."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


_initialized = False


def setup_logging(level: str | None = None, format_type: str | None = None) -> None:
    """Attach the stderr handler to the ``risklab`` logger.

    Runs once per process; later calls are no-ops until ``reset_logging()``.
    The CLI's ``--log-level`` resets first so its level wins.

    Args:
        level: Level name such as ``"DEBUG"``; unknown names mean INFO.
            Falls back to ``LOG_LEVEL``.
        format_type: ``"json"`` for JSON lines, anything else for plain text.
            Falls back to ``LOG_FORMAT``.
    """
    global _initialized
    if _initialized:
        return

    config = get_config()
    level = level or config.logging.level
    format_type = format_type or config.logging.format
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    package_logger = logging.getLogger("risklab")
    package_logger.setLevel(numeric_level)
    package_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter() if format_type == "json" else SimpleFormatter())
    package_logger.addHandler(handler)

    # caplog listens on the root logger
    package_logger.propagate = True

    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """Logger for one risklab module, e.g. ``get_logger("engine.trailing_stop")``.

    Names already starting with ``risklab.`` are used as given.
    """
    setup_logging()

    if name.startswith("risklab."):
        return logging.getLogger(name)
    return logging.getLogger(f"risklab.{name}")


def reset_logging() -> None:
    """Drop the handler so the next ``setup_logging()`` call reconfigures."""
    global _initialized
    _initialized = False
    logging.getLogger("risklab").handlers.clear()
