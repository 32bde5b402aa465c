"""JSON log lines for imgcast.

Each record becomes one JSON object on one line.  Structured fields are
passed with ``extra={"extra_fields": {...}}`` and land at the top level
next to the four fixed keys ``ts``, ``level``, ``logger`` and
``message``::

    {"ts": "2026-10-19T12:00:00.123456+00:00", "level": "INFO",
     "logger": "imgcast.upload", "message": "Upload complete",
     "op": "upload", "outcome": "success", "filename": "cat.png"}

Webhook URLs are credentials; callers redact them with
:func:`imgcast.utils.redact_url` before they reach a field.

Usage::

    from imgcast.observability import get_logger

    log = get_logger("imgcast.resolve")
    log.debug("Resolved resource", extra={"extra_fields": {"path": "img/cat.png"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any

# Set on handlers installed by get_logger so repeat calls can find them.
_HANDLER_MARK = "_imgcast_structured"


class StructuredFormatter(logging.Formatter):
    """Render a :class:`logging.LogRecord` as a single-line JSON object.

    The timestamp is the record's creation time in UTC.  Exception and
    stack text are added under ``exception`` and ``stack_info``.  Values
    that JSON cannot encode are passed through ``str``; non-ASCII text
    (the ✓ and ✗ of notices) is written as-is.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(getattr(record, "extra_fields", None) or {})

        if record.exc_info and record.exc_info[1] is not None:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(payload, default=str, ensure_ascii=False)


def _as_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def get_logger(
    name: str = "imgcast",
    *,
    level: int | str = logging.DEBUG,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Return the logger *name* with a JSON handler attached.

    The first call for a name installs one :class:`StructuredFormatter`
    handler writing to *stream* (``sys.stderr`` by default), sets *level*
    and stops propagation to ancestors.  Later calls return the same
    logger untouched.
    """
    logger = logging.getLogger(name)
    if any(getattr(h, _HANDLER_MARK, False) for h in logger.handlers):
        return logger
    resolved_level = _as_level(level)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    setattr(handler, _HANDLER_MARK, True)

    logger.addHandler(handler)
    logger.setLevel(resolved_level)
    logger.propagate = False
    return logger
