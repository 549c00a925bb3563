"""Error taxonomy for ping stores.

Only :class:`StorageUnavailable` and :class:`StorageWriteFailed` are
raised by the store.  :class:`StorageReadSkipped` and
:class:`StorageDeleteFailed` describe a single failed file inside a batch
operation and are collected into the batch outcome instead, so one bad
file never aborts an enumeration, a prune or an acknowledgment.
"""

from __future__ import annotations

from typing import Optional


class PingStoreError(Exception):
    """Base class for all ping store errors."""


class StorageUnavailable(PingStoreError):
    """The store's root directory cannot be used."""

    def __init__(self, root_dir: str, reason: str) -> None:
        super().__init__(f"ping store root {root_dir!r} is unavailable: {reason}")
        self.root_dir = root_dir
        self.reason = reason


class StorageWriteFailed(PingStoreError):
    """Persisting a single ping failed; no file was left behind."""

    def __init__(self, ping_id: int, reason: str) -> None:
        super().__init__(f"could not store ping {ping_id}: {reason}")
        self.ping_id = ping_id
        self.reason = reason


class DuplicatePingError(StorageWriteFailed):
    """A ping with the same ID is already stored."""

    def __init__(self, ping_id: int) -> None:
        super().__init__(ping_id, "a ping with this id already exists")


class StorageReadSkipped(PingStoreError):
    """A stored file could not be parsed and was left out of an enumeration."""

    def __init__(
        self,
        filename: str,
        reason: str,
        ping_id: Optional[int] = None,
    ) -> None:
        super().__init__(f"skipped malformed ping file {filename!r}: {reason}")
        self.filename = filename
        self.reason = reason
        self.ping_id = ping_id


class StorageDeleteFailed(PingStoreError):
    """Deleting a single ping file failed during a batch removal."""

    def __init__(self, ping_id: int, reason: str) -> None:
        super().__init__(f"could not delete ping {ping_id}: {reason}")
        self.ping_id = ping_id
        self.reason = reason
