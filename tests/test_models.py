"""Unit tests for TelemetryPing and BatchResult models."""

import pytest

from telemetry_ping_store.errors import StorageDeleteFailed
from telemetry_ping_store.models import (
    KEY_PAYLOAD,
    KEY_URL_PATH,
    BatchResult,
    DeleteStatus,
    TelemetryPing,
)

# ---- TelemetryPing --------------------------------------------------------


def test_ping_defaults():
    ping = TelemetryPing(unique_id=1, url_path="/submit/core")
    assert ping.unique_id == 1
    assert ping.url_path == "/submit/core"
    assert ping.payload == {}


def test_ping_to_dict_uses_short_keys():
    ping = TelemetryPing(7, "a/server/url", {"int": 42})
    assert ping.to_dict() == {KEY_URL_PATH: "a/server/url", KEY_PAYLOAD: {"int": 42}}
    assert KEY_URL_PATH == "u"
    assert KEY_PAYLOAD == "p"


def test_ping_from_dict():
    ping = TelemetryPing.from_dict(3, {"u": "url3", "p": {"str": "a String"}})
    assert ping == TelemetryPing(3, "url3", {"str": "a String"})


@pytest.mark.parametrize(
    "document",
    [
        [],
        "text",
        {"p": {}},
        {"u": "", "p": {}},
        {"u": 5, "p": {}},
        {"u": "url"},
        {"u": "url", "p": "not an object"},
    ],
)
def test_ping_from_malformed_dict_raises(document):
    with pytest.raises(ValueError):
        TelemetryPing.from_dict(1, document)


# ---- BatchResult ----------------------------------------------------------


def test_batch_result_empty_is_ok():
    result = BatchResult()
    assert result.ok is True
    assert result.removed_count == 0
    result.raise_for_failures()  # no-op


def test_batch_result_sorts_outcomes():
    result = BatchResult()
    result.add(3, DeleteStatus.REMOVED)
    result.add(5, DeleteStatus.ABSENT)
    result.add(1, DeleteStatus.REMOVED)
    result.add(9, DeleteStatus.FAILED, "permission denied")

    assert result.removed == [3, 1]
    assert result.absent == [5]
    assert result.failed_ids == [9]
    assert result.removed_count == 2
    assert result.ok is False
    assert result.to_dict() == {
        "removed": [1, 3],
        "absent": [5],
        "failed": {"9": "permission denied"},
    }


def test_batch_result_raise_for_failures():
    result = BatchResult()
    result.add(4, DeleteStatus.FAILED, "busy")
    with pytest.raises(StorageDeleteFailed) as info:
        result.raise_for_failures()
    assert info.value.ping_id == 4
    assert info.value.reason == "busy"
