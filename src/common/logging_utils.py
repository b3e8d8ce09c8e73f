"""Centralized logging setup and structured-trace helpers.

Modules obtain loggers with ``logging.getLogger(__name__)`` and attach
structured fields to DEBUG records through :func:`extra_context`.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

from constants import Constants

_CONTEXT_FIELDS = ("event", "component", "action", "outcome", "target", "count", "duration_ms")


class _ContextFormatter(logging.Formatter):
    """Formatter that appends structured context fields to DEBUG records."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        if record.levelno > logging.DEBUG:
            return text
        context = getattr(record, "context", None)
        if not context:
            return text
        fields = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{text} [{fields}]"


def _resolve_level(name: Optional[str]) -> int:
    level = getattr(logging, str(name or "").upper(), None)
    if isinstance(level, int):
        return level
    return getattr(logging, Constants.DEFAULT_LOG_LEVEL)


def configure_logging(log_file: Optional[str] = None) -> None:
    """Configure the root logger once per process.

    The level comes from the ``PACREPO_LOG_LEVEL`` environment variable,
    which the CLI sets from ``--loglevel``.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_pacrepo", False):
            root.removeHandler(handler)
            handler.close()

    formatter = _ContextFormatter(Constants.LOG_FORMAT)
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler._pacrepo = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    root.setLevel(_resolve_level(os.environ.get(Constants.ENV_LOG_LEVEL)))


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` mapping for structured log records.

    Known fields keep a stable order; ``None`` values are dropped.
    """
    ordered = {key: fields.pop(key) for key in _CONTEXT_FIELDS if key in fields}
    ordered.update(fields)
    return {"context": {key: value for key, value in ordered.items() if value is not None}}


class Timer:
    """Context manager measuring wall-clock duration in milliseconds."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
