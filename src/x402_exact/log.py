"""
Structured logging on top of the standard :mod:`logging` module.

Loggers returned by :func:`create_logger` attach an open context mapping
(component, operation, network, payer, amount, or any other key) to each
record. :class:`StructuredFormatter` renders that context either as a
human-readable line or as one JSON object per line.
"""

from __future__ import annotations

import json
import logging
import os
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

__all__ = [
    "LogContext",
    "StructuredFormatter",
    "StructuredLogger",
    "configure_logging",
    "create_logger",
    "default_logger",
]

LogContext = Mapping[str, Any]

_CONTEXT_ATTR = "x402_context"
_ERROR_ATTR = "x402_error"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _level(value: Any) -> int:
    if isinstance(value, int):
        return value
    return _LEVELS.get(str(value).lower(), logging.INFO)


def _describe_error(error: BaseException) -> Dict[str, Any]:
    described: Dict[str, Any] = {"name": type(error).__name__, "message": str(error)}
    if error.__traceback__ is not None:
        described["stack"] = "".join(traceback.format_tb(error.__traceback__))
    return described


class StructuredLogger:
    """Component-scoped logger whose methods accept a context mapping."""

    def __init__(self, component: str, logger: logging.Logger) -> None:
        self.component = component
        self.logger = logger

    def _log(
        self,
        level: int,
        message: str,
        context: Optional[LogContext] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        merged = {"component": self.component}
        merged.update(context or {})
        extra: Dict[str, Any] = {_CONTEXT_ATTR: merged}
        if error is not None:
            extra[_ERROR_ATTR] = _describe_error(error)
        self.logger.log(level, message, extra=extra)

    def debug(self, message: str, context: Optional[LogContext] = None) -> None:
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, context: Optional[LogContext] = None) -> None:
        self._log(logging.INFO, message, context)

    def warn(self, message: str, context: Optional[LogContext] = None) -> None:
        self._log(logging.WARNING, message, context)

    def error(
        self,
        message: str,
        error: Optional[BaseException] = None,
        context: Optional[LogContext] = None,
    ) -> None:
        self._log(logging.ERROR, message, context, error)


class StructuredFormatter(logging.Formatter):
    def __init__(self, output_json: bool = False) -> None:
        super().__init__()
        self.output_json = output_json

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        level = record.levelname.lower()
        if level == "warning":
            level = "warn"
        context = dict(getattr(record, _CONTEXT_ATTR, None) or {})
        error = getattr(record, _ERROR_ATTR, None)
        message = record.getMessage()

        if self.output_json:
            entry: Dict[str, Any] = {
                "timestamp": timestamp,
                "level": level,
                "message": message,
                "context": context,
            }
            if error:
                entry["error"] = error
            return json.dumps(entry, default=str)

        component = context.pop("component", record.name)
        parts = [f"[{timestamp}]", f"[{level.upper()}]", f"[{component}]", message]
        if context:
            parts.append(json.dumps(context, default=str))
        if error:
            parts.append(f"\n  Error: {error['name']}: {error['message']}")
            if error.get("stack"):
                parts.append(f"\n  Stack: {error['stack']}")
        return " ".join(parts)


def create_logger(component: str, *, min_level: Optional[Any] = None) -> StructuredLogger:
    """
    Return a :class:`StructuredLogger` for ``component``.

    Records go to the ``x402.<component>`` logger; handlers and output format
    are configured once via :func:`configure_logging`.
    """
    name = component if component.startswith("x402") else f"x402.{component}"
    logger = logging.getLogger(name)
    if min_level is not None:
        logger.setLevel(_level(min_level))
    return StructuredLogger(component, logger)


def configure_logging(level: Any = "INFO", *, output_json: Optional[bool] = None) -> None:
    if output_json is None:
        output_json = os.environ.get("X402_ENV") == "production"
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter(output_json=output_json))
    logging.basicConfig(level=_level(level), handlers=[handler])


default_logger = create_logger("x402")
