"""Configuration for ping stores."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

# Default number of pings kept on disk before pruning evicts the oldest.
MAX_PING_COUNT = 40

# Temp files older than this belong to writes that will never finish.
STALE_TEMP_SECONDS = 3600.0


class MalformedPingPolicy(StrEnum):
    """What enumeration does with a ping file whose content cannot be parsed.

    - SKIP: leave it out silently.
    - WARN: leave it out, log a warning and record it in ``skipped``.
    - QUARANTINE: like WARN, and rename it to ``<name>.corrupt`` (or
      ``<name>.N.corrupt`` if that is taken) so later
      enumerations, prunes and acknowledgments no longer see it.
    """

    SKIP = "skip"
    WARN = "warn"
    QUARANTINE = "quarantine"


@dataclass
class StoreConfig:
    """Configuration knobs for a ping store.

    Parameters
    ----------
    max_ping_count : int
        Capacity enforced by :meth:`PingStore.maybe_prune_pings`.
    malformed_policy : MalformedPingPolicy
        Handling of unparseable ping files during enumeration.
    fsync : bool
        When *True* (default), each write is flushed to stable storage
        before it is moved into place.
    stale_temp_seconds : float
        Age after which a leftover temporary file from an interrupted
        write is removed by the next prune.
    """

    max_ping_count: int = MAX_PING_COUNT
    malformed_policy: MalformedPingPolicy = MalformedPingPolicy.WARN
    fsync: bool = True
    stale_temp_seconds: float = STALE_TEMP_SECONDS

    def __post_init__(self) -> None:
        if isinstance(self.max_ping_count, bool) or not isinstance(self.max_ping_count, int):
            raise ValueError("max_ping_count must be an int")
        if self.max_ping_count < 0:
            raise ValueError(f"max_ping_count must be non-negative, got {self.max_ping_count}")
        if isinstance(self.stale_temp_seconds, bool) or not isinstance(
            self.stale_temp_seconds, (int, float)
        ) or self.stale_temp_seconds < 0:
            raise ValueError("stale_temp_seconds must be a non-negative number")
        self.malformed_policy = MalformedPingPolicy(self.malformed_policy)
