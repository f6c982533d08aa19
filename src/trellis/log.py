"""Structured logging for the request pipeline.

Core components never format or route log output themselves.  They call
an injected *sink* with a level, a message, and a flat data mapping::

    log("info", "Found page with parameters", {"params": {"id": "42"}})

``LoggerSink`` is the default sink and forwards entries to the stdlib
``trellis`` logger.  ``JSONFormatter`` renders them as one JSON object
per line, matching the ``log_format="json"`` app setting.
"""

import json
import logging
import sys
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, Literal, Protocol

type LogLevel = Literal["info", "warn", "error"]

_LEVELS: dict[str, int] = {
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# logging level number -> sink level name (used by JSONFormatter)
_NAMES: dict[int, str] = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


class LogSink(Protocol):
    """Anything that accepts ``(level, message, data)`` log entries."""

    def __call__(
        self,
        level: LogLevel,
        message: str,
        data: Mapping[str, Any] | None = None,
    ) -> None: ...


class LoggerSink:
    """Forward sink entries to a stdlib logger.

    The entry's ``data`` travels on the log record as ``record.data`` so
    formatters can render it.
    """

    __slots__ = ("_logger",)

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("trellis")

    def __call__(
        self,
        level: LogLevel,
        message: str,
        data: Mapping[str, Any] | None = None,
    ) -> None:
        self._logger.log(
            _LEVELS.get(level, logging.INFO),
            message,
            extra={"data": dict(data or {})},
        )


class JSONFormatter(logging.Formatter):
    """Render records as ``{"level", "message", "data", "timestamp"}`` lines."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "level": _NAMES.get(record.levelno, record.levelname.lower()),
            "message": record.getMessage(),
            "data": getattr(record, "data", {}),
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
        }
        if record.exc_info:
            entry["data"] = {**entry["data"], "exception": self.formatException(record.exc_info)}
        return json.dumps(entry, default=str)


def configure_logging(level: str = "info", fmt: str = "json") -> None:
    """Install a stderr handler on the ``trellis`` logger.

    Idempotent: calling it again replaces the handler it installed before.
    """
    logger = logging.getLogger("trellis")
    for handler in list(logger.handlers):
        if getattr(handler, "_trellis", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler._trellis = True  # type: ignore[attr-defined]
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = False
