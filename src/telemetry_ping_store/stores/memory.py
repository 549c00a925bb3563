"""In-memory ping store.

Holds pings in a dict keyed by ``unique_id``.  It has the same pruning
and acknowledgment semantics as :class:`JSONFilePingStore` but nothing
survives the process, so it is meant for upload-client tests and for
callers that do not need durability.
"""

from __future__ import annotations

import copy
import threading
from typing import Dict, Iterable, List, Optional

from ..errors import DuplicatePingError
from ..models import BatchResult, DeleteStatus, TelemetryPing
from .base import PingStore
from .config import StoreConfig
from .filenames import validate_ping_id


class InMemoryPingStore(PingStore):
    """Thread-safe, in-memory ping store."""

    def __init__(
        self,
        config: StoreConfig | None = None,
        store_id: Optional[str] = None,
    ) -> None:
        super().__init__(config=config, store_id=store_id)
        self._pings: Dict[int, TelemetryPing] = {}
        self._lock = threading.RLock()

    def store_ping(self, ping: TelemetryPing, replace: bool = False) -> None:
        ping_id = validate_ping_id(ping.unique_id)
        if not isinstance(ping.url_path, str) or not ping.url_path:
            raise ValueError("url_path must be a non-empty string")
        if not isinstance(ping.payload, dict):
            raise ValueError("payload must be a dict")
        with self._lock:
            if not replace and ping_id in self._pings:
                raise DuplicatePingError(ping_id)
            # Copy so later mutation by the caller does not leak in.
            self._pings[ping_id] = copy.deepcopy(ping)

    def get_all_pings(self) -> List[TelemetryPing]:
        with self._lock:
            return [copy.deepcopy(p) for p in self._pings.values()]

    def stored_ids(self) -> List[int]:
        with self._lock:
            return sorted(self._pings)

    def _delete(self, ping_id: int) -> DeleteStatus:
        if self._pings.pop(ping_id, None) is None:
            return DeleteStatus.ABSENT
        return DeleteStatus.REMOVED

    def prune(self, max_count: Optional[int] = None) -> BatchResult:
        limit = self._resolve_max_count(max_count)
        result = BatchResult()
        with self._lock:
            ids = sorted(self._pings)
            for ping_id in ids[: max(0, len(ids) - limit)]:
                result.add(ping_id, self._delete(ping_id))
        return result

    def on_upload_attempt_complete(self, succeeded_ids: Iterable[int]) -> BatchResult:
        result = BatchResult()
        with self._lock:
            for ping_id in self._normalize_ids(succeeded_ids):
                result.add(ping_id, self._delete(ping_id))
        return result
