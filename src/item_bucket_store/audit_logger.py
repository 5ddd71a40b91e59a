"""Structured audit logger for store mutations and provider fetches.

Wraps Python's :mod:`logging` module so that every event is emitted as a
single JSON line.  Inserts, removals and provider fetches each log one
event; rejected operations log the reason they were rejected:

    item_inserted / item_insert_rejected
    item_removed  / item_remove_rejected
    item_fetched  / item_fetch_failed

Usage::

    from item_bucket_store.audit_logger import get_audit_logger

    logger = get_audit_logger()
    logger.log_event("item_inserted", identifier="Cafe Noir", bucket="C")
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_LOGGER_NAME = "item_bucket_store.audit"


class _JsonFormatter(logging.Formatter):
    """Render a log record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra = getattr(record, "_structured", None)
        if extra:
            payload.update(extra)
        return json.dumps(payload, default=str)


def get_audit_logger(name: str = _LOGGER_NAME) -> "AuditLogger":
    """Return an :class:`AuditLogger` bound to the logger called *name*."""
    return AuditLogger(name)


class AuditLogger:
    """JSON-line logger for item store events.

    Parameters
    ----------
    name : str
        Logger name (passed to :func:`logging.getLogger`).
    """

    def __init__(self, name: str = _LOGGER_NAME) -> None:
        self._logger = logging.getLogger(name)
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(_JsonFormatter())
            self._logger.addHandler(handler)
            self._logger.setLevel(logging.DEBUG)

    @property
    def name(self) -> str:
        return self._logger.name

    def log_event(
        self,
        event: str,
        *,
        correlation_id: Optional[str] = None,
        level: int = logging.INFO,
        **fields: Any,
    ) -> Dict[str, Any]:
        """Emit a structured log entry and return its payload dict.

        Parameters
        ----------
        event : str
            Short event name (e.g. ``"item_inserted"``).
        correlation_id : str, optional
            Caller-supplied trace identifier, copied into the payload.
        level : int
            Python logging level (default ``INFO``).
        **fields
            Extra key-value pairs included in the JSON payload.
        """
        structured: Dict[str, Any] = {"event": event}
        if correlation_id is not None:
            structured["correlation_id"] = correlation_id
        structured.update(fields)

        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "(audit)",
            0,
            event,
            (),
            None,
        )
        record._structured = structured  # type: ignore[attr-defined]
        self._logger.handle(record)
        return structured
