"""
Structured JSON logging for the commission kernel.

Every record is one JSON line: a fixed envelope (``ts``, ``level``,
``logger``, ``message``), the run/record context bound through
``LogContext``, the ``extra=`` fields of the call, and for exceptions the
type, message, ``code`` and public attributes of the error.

Usage:
    logger = get_logger("services.calculator")
    with LogContext.bind(row_number=3, person_id=4):
        logger.info("commission_calculated", extra={"commission": "0.60"})
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any

# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

_EMPTY: Mapping[str, Any] = MappingProxyType({})

_context: ContextVar[Mapping[str, Any]] = ContextVar("commission_log_context", default=_EMPTY)


class LogContext:
    """
    Run-scoped and record-scoped fields added to every log line.

    Fields: ``run_id`` and ``source`` for a whole run, ``row_number`` and
    ``person_id`` for the record being processed. ``None`` values are
    never stored.
    """

    FIELDS: tuple[str, ...] = ("run_id", "source", "row_number", "person_id")

    @classmethod
    def _merged(cls, fields: Mapping[str, Any]) -> Mapping[str, Any]:
        unknown = set(fields) - set(cls.FIELDS)
        if unknown:
            raise ValueError(f"Unknown log context field(s): {sorted(unknown)}")
        merged = dict(_context.get())
        merged.update({k: v for k, v in fields.items() if v is not None})
        return MappingProxyType(merged)

    @classmethod
    def set(cls, **fields: Any) -> None:
        """Set context fields. Only non-None values are updated."""
        _context.set(cls._merged(fields))

    @classmethod
    def get_all(cls) -> dict[str, Any]:
        """Return the bound fields in declaration order."""
        current = _context.get()
        return {name: current[name] for name in cls.FIELDS if name in current}

    @classmethod
    def clear(cls) -> None:
        _context.set(_EMPTY)

    @classmethod
    @contextmanager
    def bind(cls, **fields: Any) -> Iterator[type["LogContext"]]:
        """Set fields for the duration of a ``with`` block, then restore."""
        token = _context.set(cls._merged(fields))
        try:
            yield cls
        finally:
            _context.reset(token)


# ---------------------------------------------------------------------------
# JSON Formatter
# ---------------------------------------------------------------------------

_STDLIB_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "taskName"}


def _to_json(obj: Any) -> Any:
    """Render values json cannot handle. Decimals stay exact as text."""
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    return str(obj)


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = self._envelope(record)
        payload.update(LogContext.get_all())
        for key, val in self._extras(record):
            payload.setdefault(key, val)
        if record.exc_info and record.exc_info[1] is not None:
            payload.update(self._exception_fields(record))
        return json.dumps(payload, default=_to_json)

    def _envelope(self, record: logging.LogRecord) -> dict[str, Any]:
        return {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

    def _extras(self, record: logging.LogRecord) -> Iterator[tuple[str, Any]]:
        for key, val in vars(record).items():
            if key not in _STDLIB_KEYS:
                yield key, val

    def _exception_fields(self, record: logging.LogRecord) -> dict[str, Any]:
        exc = record.exc_info[1]
        fields: dict[str, Any] = {
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
        }
        code = getattr(exc, "code", None)
        if code is not None:
            fields["exc_code"] = code
        # Structured attributes of CommissionKernelError subclasses
        for name, val in vars(exc).items():
            if not name.startswith("_"):
                fields[f"exc_{name}"] = val
        fields["traceback"] = self.formatException(record.exc_info)
        return fields


# ---------------------------------------------------------------------------
# Logger factory
# ---------------------------------------------------------------------------

_LOGGER_PREFIX = "commission_kernel"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the commission_kernel namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------

_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach one JSON handler to the commission_kernel logger (idempotent).

    ``level`` accepts a number or a name such as ``"DEBUG"``. Records do
    not propagate to the root logger once configured.
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    h = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
    h.setFormatter(StructuredFormatter())

    root_logger = logging.getLogger(_LOGGER_PREFIX)
    root_logger.setLevel(level)
    root_logger.propagate = False
    root_logger.addHandler(h)


def reset_logging() -> None:
    """Reset logging configuration. FOR TESTING ONLY."""
    global _configured
    with _lock:
        _configured = False
    logger = logging.getLogger(_LOGGER_PREFIX)
    logger.handlers.clear()
    logger.setLevel(logging.WARNING)
    logger.propagate = True
