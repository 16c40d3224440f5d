"""
Structured Logging Configuration
structlog over a handler on the ``polyview`` logger; the root logger is
not touched.
"""

import logging
import sys
from enum import Enum
from typing import Any, MutableMapping, TextIO

import structlog
from pythonjsonlogger import jsonlogger

from .config import get_settings

PACKAGE_LOGGER = "polyview"

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def enum_values(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Log platforms, event kinds and failure reasons by their value."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def _package_handler(json_logs: bool, stream: TextIO | None) -> logging.Handler:
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(PACKAGE_LOGGER)
    handler.setFormatter(jsonlogger.JsonFormatter(JSON_FORMAT) if json_logs else logging.Formatter(TEXT_FORMAT))
    return handler


def configure_logging(level: str | None = None, json_logs: bool | None = None, stream: TextIO | None = None) -> None:
    """
    Configure structured logging for polyview.

    Calling it again replaces the previous handler rather than adding one.

    Args:
        level: Log level name; defaults to ``Settings.log_level``
        json_logs: JSON output; defaults to ``Settings.json_logs``
        stream: Output stream (stdout when omitted)
    """
    settings = get_settings()
    level = level or settings.log_level
    json_logs = settings.json_logs if json_logs is None else json_logs

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if handler.get_name() == PACKAGE_LOGGER:
            package_logger.removeHandler(handler)
    package_logger.addHandler(_package_handler(json_logs, stream))
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.propagate = False

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            enum_values,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Structured logger for ``name`` (typically ``__name__``)."""
    return structlog.get_logger(name)


class LogContext:
    """
    Bind fields to every log line emitted in scope.

    The coordinator binds a ``render_id`` per render call.
    """

    def __init__(self, **kwargs: Any):
        self.context = kwargs

    def __enter__(self) -> "LogContext":
        structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, *args: Any) -> None:
        structlog.contextvars.unbind_contextvars(*self.context.keys())
