"""Abstract interface shared by all ping stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from ..models import BatchResult, TelemetryPing
from .config import StoreConfig


class PingStore(ABC):
    """A capacity-bounded collection of pings awaiting upload.

    Producers call :meth:`store_ping`.  An upload client reads
    :meth:`get_all_pings` and reports delivered IDs through
    :meth:`on_upload_attempt_complete`.  A scheduler calls
    :meth:`maybe_prune_pings` to evict the oldest pings beyond capacity.
    Inserting never prunes on its own.

    Parameters
    ----------
    config : StoreConfig, optional
        Capacity and read policy.  Defaults to :class:`StoreConfig`.
    store_id : str, optional
        Label attached to log events.
    """

    def __init__(
        self,
        config: StoreConfig | None = None,
        store_id: Optional[str] = None,
    ) -> None:
        self._config = config or StoreConfig()
        self._store_id = store_id

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    @abstractmethod
    def store_ping(self, ping: TelemetryPing, replace: bool = False) -> None:
        """Persist *ping*.

        Raises :class:`DuplicatePingError` if its ID is already stored and
        *replace* is False.
        """

    @abstractmethod
    def get_all_pings(self) -> List[TelemetryPing]:
        """Return every stored ping, in no particular order."""

    @abstractmethod
    def prune(self, max_count: Optional[int] = None) -> BatchResult:
        """Delete the smallest-ID pings until at most *max_count* remain."""

    @abstractmethod
    def on_upload_attempt_complete(self, succeeded_ids: Iterable[int]) -> BatchResult:
        """Delete exactly the pings in *succeeded_ids*; unknown IDs are ignored."""

    @abstractmethod
    def stored_ids(self) -> List[int]:
        """Return the IDs of all stored pings, ascending."""

    # ------------------------------------------------------------------
    # Conveniences
    # ------------------------------------------------------------------

    def store(
        self,
        ping_id: int,
        url_path: str,
        payload: Dict[str, Any],
        replace: bool = False,
    ) -> None:
        """Shorthand for ``store_ping(TelemetryPing(ping_id, url_path, payload))``."""
        self.store_ping(TelemetryPing(ping_id, url_path, payload), replace=replace)

    def acknowledge(self, succeeded_ids: Iterable[int]) -> BatchResult:
        """Alias of :meth:`on_upload_attempt_complete`."""
        return self.on_upload_attempt_complete(succeeded_ids)

    def maybe_prune_pings(self) -> BatchResult:
        """Prune down to the configured ``max_ping_count``."""
        return self.prune(self._config.max_ping_count)

    def count(self) -> int:
        return len(self.stored_ids())

    def __len__(self) -> int:
        return self.count()

    def _resolve_max_count(self, max_count: Optional[int]) -> int:
        if max_count is None:
            return self._config.max_ping_count
        if isinstance(max_count, bool) or not isinstance(max_count, int) or max_count < 0:
            raise ValueError(f"max_count must be a non-negative int, got {max_count!r}")
        return max_count

    @staticmethod
    def _normalize_ids(succeeded_ids: Iterable[int]) -> List[int]:
        ids = set(succeeded_ids)
        for ping_id in ids:
            if isinstance(ping_id, bool) or not isinstance(ping_id, int):
                raise ValueError(f"ping ids must be ints, got {ping_id!r}")
        return sorted(ids)

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def max_ping_count(self) -> int:
        return self._config.max_ping_count

    @property
    def store_id(self) -> Optional[str]:
        return self._store_id
