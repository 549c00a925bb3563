"""telemetry-ping-store: durable, capacity-bounded storage for telemetry pings."""

from .errors import (
    DuplicatePingError,
    PingStoreError,
    StorageDeleteFailed,
    StorageReadSkipped,
    StorageUnavailable,
    StorageWriteFailed,
)
from .event_log import EventLogger, get_event_logger
from .models import BatchResult, DeleteStatus, TelemetryPing
from .stores import (
    MAX_PING_COUNT,
    InMemoryPingStore,
    JSONFilePingStore,
    MalformedPingPolicy,
    PingStore,
    StoreConfig,
    filename_for_id,
    id_from_filename,
)

__version__ = "0.1.0"
__all__ = [
    "BatchResult",
    "DeleteStatus",
    "DuplicatePingError",
    "EventLogger",
    "InMemoryPingStore",
    "JSONFilePingStore",
    "MAX_PING_COUNT",
    "MalformedPingPolicy",
    "PingStore",
    "PingStoreError",
    "StorageDeleteFailed",
    "StorageReadSkipped",
    "StorageUnavailable",
    "StorageWriteFailed",
    "StoreConfig",
    "TelemetryPing",
    "filename_for_id",
    "get_event_logger",
    "id_from_filename",
]
