"""Structured logging configuration.

Events are rendered as JSON lines on stderr so stdout stays reserved for
command output such as the created stratum path. structlog is preferred;
a stdlib adapter with the same keyword-field interface is the fallback.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any

LOG_LEVEL_ENV = "STRATUM_LOG_LEVEL"


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog or stdlib logger with structured output.
    """
    try:
        import structlog
    except ImportError:
        return _get_standard_logger(name)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(default=str),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_log_level()),
        logger_factory=lambda *args: structlog.PrintLogger(sys.stderr),
        cache_logger_on_first_use=False,
    )
    return structlog.get_logger(name)


def resolve_log_level() -> int:
    """Read the minimum log level from ``STRATUM_LOG_LEVEL``.

    Unknown names fall back to INFO.
    """
    level_name = os.getenv(LOG_LEVEL_ENV, "info").strip().upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def _get_standard_logger(name: str) -> Any:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(resolve_log_level())
    return _StructuredStandardLogger(logger)


class _StructuredStandardLogger:
    """Stdlib logger adapter that accepts structured keyword fields."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def debug(self, event: str, **fields: object) -> None:
        self._logger.debug(_format_event(event, fields))

    def info(self, event: str, **fields: object) -> None:
        self._logger.info(_format_event(event, fields))

    def warning(self, event: str, **fields: object) -> None:
        self._logger.warning(_format_event(event, fields))

    def error(self, event: str, **fields: object) -> None:
        self._logger.error(_format_event(event, fields))


def _format_event(event: str, fields: dict[str, object]) -> str:
    """Render one event as a JSON string, or the bare name without fields."""
    if not fields:
        return event
    return json.dumps({"event": event, **fields}, sort_keys=True, default=str)
