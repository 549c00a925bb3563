"""Unit tests for the structured event logger."""

import json
import logging

from telemetry_ping_store.event_log import EventLogger, get_event_logger


def test_event_logger_emits_json(capfd):
    """EventLogger.log_event() emits a JSON line to stderr."""
    logger = EventLogger("test.events.json", store_id="core")
    logger.log_event("ping_stored", ping_id=12)
    captured = capfd.readouterr()
    payload = json.loads(captured.err.strip())
    assert payload["event"] == "ping_stored"
    assert payload["store_id"] == "core"
    assert payload["ping_id"] == 12
    assert payload["level"] == "INFO"
    assert "timestamp" in payload


def test_event_logger_returns_payload():
    logger = EventLogger("test.events.returns")
    result = logger.log_event("prune_complete", removed=3)
    assert result == {"event": "prune_complete", "removed": 3}


def test_event_logger_omits_missing_store_id():
    logger = EventLogger("test.events.no_store")
    assert "store_id" not in logger.log_event("ev")


def test_event_logger_respects_level(capfd):
    logger = EventLogger("test.events.level")
    logger.logger.setLevel(logging.WARNING)
    logger.log_event("quiet", level=logging.DEBUG)
    logger.log_event("loud", level=logging.WARNING)
    lines = [json.loads(line) for line in capfd.readouterr().err.splitlines()]
    assert [line["event"] for line in lines] == ["loud"]
    assert lines[0]["level"] == "WARNING"


def test_handler_attached_once():
    first = EventLogger("test.events.once")
    EventLogger("test.events.once")
    assert len(first.logger.handlers) == 1


def test_get_event_logger_returns_instance():
    assert isinstance(get_event_logger(), EventLogger)


def test_bound_store_id_is_added_to_every_event():
    logger = get_event_logger(store_id="core", name="test.events.bound")
    assert logger.store_id == "core"
    assert logger.log_event("prune_complete")["store_id"] == "core"
    assert logger.log_event("upload_acknowledged", removed=[1])["store_id"] == "core"


def test_stores_share_one_handler():
    first = get_event_logger(store_id="a", name="test.events.shared")
    second = get_event_logger(store_id="b", name="test.events.shared")
    assert first.logger is second.logger
    assert len(first.logger.handlers) == 1
    assert first.log_event("ev")["store_id"] == "a"
    assert second.log_event("ev")["store_id"] == "b"
