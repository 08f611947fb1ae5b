"""
Structured Logging for Bucketizer Hosts

Library modules log through logging.getLogger(__name__) and never
configure handlers. Hosts call setup_logging() once and get one JSON
object per line:

    {"@timestamp": "...", "level": "INFO", "logger": "bucketizer.pipeline.stream",
     "message": "Stream resumed", "stream": "people", "strategy": "substring"}

Fields come from three places, later ones winning:
1. Scoped fields (StructuredLogger.scope), per context
2. Bound fields (StructuredLogger.bind), per logger instance
3. Call keywords (logger.info("...", records=10))
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Iterator, Mapping, Optional, TextIO


class LogLevel(IntEnum):
    """Log level enumeration."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def from_name(cls, name: str) -> LogLevel:
        """Level by name; unknown names fall back to INFO."""
        return cls.__members__.get(name.strip().upper(), cls.INFO)


PLAIN_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"

_scoped_fields: ContextVar[Mapping[str, Any]] = ContextVar("bucketizer_log_fields", default={})

# Attributes every LogRecord carries; anything else arrived through `extra`
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


@dataclass
class LogEntry:
    """One emitted line before serialization."""
    timestamp: datetime
    level: str
    logger: str
    message: str
    fields: dict[str, Any] = field(default_factory=dict)

    def as_json(self) -> str:
        payload = {
            "@timestamp": self.timestamp.isoformat(),
            "level": self.level,
            "logger": self.logger,
            "message": self.message,
        }
        payload.update(self.fields)
        return json.dumps(payload, default=str)


class JsonFormatter(logging.Formatter):
    """Renders records as LogEntry JSON, merging scoped fields and extras."""

    def format(self, record: logging.LogRecord) -> str:
        fields = dict(_scoped_fields.get())
        fields.update(
            (key, value) for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS
        )
        if record.exc_info:
            fields["exception"] = self.formatException(record.exc_info)

        return LogEntry(
            timestamp=datetime.fromtimestamp(record.created, timezone.utc),
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
            fields=fields,
        ).as_json()


class StructuredLogger:
    """
    Keyword-field logger over a stdlib logger.

    Usage:
        logger = StructuredLogger(__name__).bind(stream="people")

        with StructuredLogger.scope(path="./state/people.ckpt"):
            logger.info("Checkpoint written", records=1000)
    """

    __slots__ = ("_logger", "_bound")

    def __init__(self, name: str, bound: Optional[Mapping[str, Any]] = None) -> None:
        self._logger = logging.getLogger(name)
        self._bound: dict[str, Any] = dict(bound or {})

    def bind(self, **fields: Any) -> StructuredLogger:
        """Logger for the same name carrying additional fields."""
        return StructuredLogger(self._logger.name, {**self._bound, **fields})

    @property
    def name(self) -> str:
        return self._logger.name

    def debug(self, message: str, **fields: Any) -> None:
        self._emit(LogLevel.DEBUG, message, fields)

    def info(self, message: str, **fields: Any) -> None:
        self._emit(LogLevel.INFO, message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._emit(LogLevel.WARNING, message, fields)

    def error(self, message: str, **fields: Any) -> None:
        self._emit(LogLevel.ERROR, message, fields)

    def _emit(self, level: LogLevel, message: str, fields: dict[str, Any]) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, message, extra={**self._bound, **fields})

    @staticmethod
    @contextmanager
    def scope(**fields: Any) -> Iterator[None]:
        """Attach fields to every record logged inside the block."""
        token = _scoped_fields.set({**_scoped_fields.get(), **fields})
        try:
            yield
        finally:
            _scoped_fields.reset(token)


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    json_output: bool = True,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """
    Route all records to a single stream handler on the root logger.

    Replaces previously installed root handlers and returns the new one.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter() if json_output else logging.Formatter(PLAIN_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    return handler
