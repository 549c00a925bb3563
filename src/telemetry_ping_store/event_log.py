"""Structured event logger for ping store operations.

Every store operation is emitted as one JSON line on the
``telemetry_ping_store.events`` logger.  Each store binds its own
:class:`EventLogger` carrying the store's label, so events from several
stores sharing a process can be told apart.  Events carry the ping IDs
they touched, which lets an operator follow a ping through its
lifecycle:

    ping_stored → (ping_read_skipped → ping_quarantined)
                → prune_complete | upload_acknowledged

Usage::

    from telemetry_ping_store.event_log import get_event_logger

    log = get_event_logger(store_id="core")
    log.log_event("ping_stored", ping_id=12)
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_LOGGER_NAME = "telemetry_ping_store.events"


class _JsonFormatter(logging.Formatter):
    """Emit each log record as a single JSON line."""

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


def get_event_logger(
    store_id: Optional[str] = None, name: str = _LOGGER_NAME
) -> "EventLogger":
    """Return an :class:`EventLogger` bound to the store labelled *store_id*.

    Loggers share the underlying :class:`logging.Logger` for *name*, so
    every store writes through the same JSON handler.
    """
    return EventLogger(name, store_id=store_id)


class EventLogger:
    """JSON-structured logger for the events of one ping store.

    Parameters
    ----------
    name : str
        Logger name (passed to :func:`logging.getLogger`).
    store_id : str, optional
        Store label added to every event as ``store_id``.
    """

    def __init__(self, name: str = _LOGGER_NAME, store_id: Optional[str] = None) -> None:
        self._logger = logging.getLogger(name)
        self._store_id = store_id
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(_JsonFormatter())
            self._logger.addHandler(handler)
            self._logger.setLevel(logging.DEBUG)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def store_id(self) -> Optional[str]:
        return self._store_id

    def log_event(self, event: str, *, level: int = logging.INFO, **fields: Any) -> Dict[str, Any]:
        """Emit one store event and return its structured payload.

        ``ping_id`` and ``removed`` style fields are passed straight
        through; the bound ``store_id`` is added when the store has one.
        Events below the logger's level are not emitted but the payload
        is still returned.
        """
        structured: Dict[str, Any] = {"event": event}
        if self._store_id is not None:
            structured["store_id"] = self._store_id
        structured.update(fields)

        if not self._logger.isEnabledFor(level):
            return structured

        record = self._logger.makeRecord(
            self._logger.name, level, "(ping-store)", 0, event, (), None
        )
        record._structured = structured  # type: ignore[attr-defined]
        self._logger.handle(record)
        return structured
