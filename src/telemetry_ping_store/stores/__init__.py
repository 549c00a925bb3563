"""Ping store implementations."""

from .base import PingStore
from .config import MAX_PING_COUNT, MalformedPingPolicy, StoreConfig
from .filenames import filename_for_id, id_from_filename, is_ping_filename
from .json_file import JSONFilePingStore
from .memory import InMemoryPingStore

__all__ = [
    "InMemoryPingStore",
    "JSONFilePingStore",
    "MAX_PING_COUNT",
    "MalformedPingPolicy",
    "PingStore",
    "StoreConfig",
    "filename_for_id",
    "id_from_filename",
    "is_ping_filename",
]
