"""Data models for the telemetry ping store."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, List

from .errors import StorageDeleteFailed

# Keys of the JSON document written for each ping.
KEY_URL_PATH = "u"
KEY_PAYLOAD = "p"


@dataclass
class TelemetryPing:
    """A single persisted ping.

    Parameters
    ----------
    unique_id : int
        Caller-assigned, never reused; also the eviction order.
    url_path : str
        Destination the upload client sends the payload to.
    payload : dict
        Opaque JSON-serializable document.
    """

    unique_id: int
    url_path: str
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Return the document stored on disk for this ping."""
        return {KEY_URL_PATH: self.url_path, KEY_PAYLOAD: self.payload}

    @classmethod
    def from_dict(cls, unique_id: int, data: Any) -> "TelemetryPing":
        """Build a ping from a stored document; raise ``ValueError`` if malformed."""
        if not isinstance(data, dict):
            raise ValueError("ping document is not an object")
        url_path = data.get(KEY_URL_PATH)
        if not isinstance(url_path, str) or not url_path:
            raise ValueError(f"missing or empty {KEY_URL_PATH!r}")
        payload = data.get(KEY_PAYLOAD)
        if not isinstance(payload, dict):
            raise ValueError(f"missing or non-object {KEY_PAYLOAD!r}")
        return cls(unique_id=unique_id, url_path=url_path, payload=payload)


class DeleteStatus(StrEnum):
    """Outcome of deleting one ping.  ABSENT counts as success."""

    REMOVED = "removed"
    ABSENT = "absent"
    FAILED = "failed"


@dataclass
class BatchResult:
    """Aggregate outcome of a prune or acknowledgment pass."""

    removed: List[int] = field(default_factory=list)
    absent: List[int] = field(default_factory=list)
    failures: List[StorageDeleteFailed] = field(default_factory=list)

    def add(self, ping_id: int, status: DeleteStatus, reason: str = "") -> None:
        if status is DeleteStatus.REMOVED:
            self.removed.append(ping_id)
        elif status is DeleteStatus.ABSENT:
            self.absent.append(ping_id)
        else:
            self.failures.append(StorageDeleteFailed(ping_id, reason))

    @property
    def removed_count(self) -> int:
        return len(self.removed)

    @property
    def failed_ids(self) -> List[int]:
        return [f.ping_id for f in self.failures]

    @property
    def ok(self) -> bool:
        """True when every requested deletion succeeded or was already done."""
        return not self.failures

    def raise_for_failures(self) -> None:
        """Raise the first :class:`StorageDeleteFailed`, if any."""
        if self.failures:
            raise self.failures[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "removed": sorted(self.removed),
            "absent": sorted(self.absent),
            "failed": {str(f.ping_id): f.reason for f in self.failures},
        }
