"""Ping store that keeps one JSON file per ping in a directory.

The directory is the table: a ping's ID is encoded in its file name
(see :mod:`.filenames`) and its URL path and payload are the file's
JSON content.  Writes are published atomically: the document is written
to a temporary file in the same directory and then linked (new pings) or
renamed (replacements) into place, so a concurrent reader sees either
the complete file or nothing.

Eviction order comes from the IDs alone.  Modification times are only
used to recognise temporary files abandoned by interrupted writes.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import time
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ..errors import (
    DuplicatePingError,
    StorageReadSkipped,
    StorageUnavailable,
    StorageWriteFailed,
)
from ..event_log import get_event_logger
from ..models import BatchResult, DeleteStatus, TelemetryPing
from .base import PingStore
from .config import MalformedPingPolicy, StoreConfig
from .filenames import filename_for_id, id_from_filename, is_ping_filename, validate_ping_id

# In-flight writes; never matches the ping file name pattern.
TEMP_PREFIX = ".ping-"
TEMP_SUFFIX = ".tmp"
QUARANTINE_SUFFIX = ".corrupt"


class JSONFilePingStore(PingStore):
    """Durable ping store backed by a directory of JSON files.

    Parameters
    ----------
    root_dir : str or os.PathLike
        Directory holding the ping files.  Created (with parents) if it
        does not exist.  Files already present are not inspected until
        they are read.
    config : StoreConfig, optional
        Capacity, malformed-file policy and fsync behaviour.
    store_id : str, optional
        Label attached to log events.

    Raises
    ------
    StorageUnavailable
        If *root_dir* is not a directory, cannot be created, or is not
        writable.
    """

    def __init__(
        self,
        root_dir: str | os.PathLike,
        config: StoreConfig | None = None,
        store_id: Optional[str] = None,
    ) -> None:
        super().__init__(config=config, store_id=store_id)
        self._root = Path(root_dir)
        if self._root.exists() and not self._root.is_dir():
            raise StorageUnavailable(str(self._root), "not a directory")
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailable(str(self._root), str(exc)) from exc
        if not os.access(self._root, os.W_OK | os.X_OK):
            raise StorageUnavailable(str(self._root), "directory is not writable")
        self._lock = threading.RLock()
        self._log = get_event_logger(store_id=store_id)
        self._skipped: List[StorageReadSkipped] = []

    # ------------------------------------------------------------------
    # ID <-> file mapping
    # ------------------------------------------------------------------

    def get_ping_file(self, ping_id: int) -> Path:
        """Return the path of the file that stores *ping_id*."""
        return self._root / filename_for_id(ping_id)

    @staticmethod
    def id_from_filename(name: str) -> int:
        """Return the ping ID encoded in the file name *name*."""
        return id_from_filename(name)

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def store_ping(self, ping: TelemetryPing, replace: bool = False) -> None:
        """Atomically write *ping* to its own file.

        Raises
        ------
        ValueError
            If the ID, URL path or payload is not storable.
        DuplicatePingError
            If the ID is already stored and *replace* is False.
        StorageWriteFailed
            If the write or rename fails.  No file is left behind.
        """
        ping_id = validate_ping_id(ping.unique_id)
        if not isinstance(ping.url_path, str) or not ping.url_path:
            raise ValueError("url_path must be a non-empty string")
        if not isinstance(ping.payload, dict):
            raise ValueError("payload must be a dict")
        try:
            document = json.dumps(ping.to_dict(), allow_nan=False)
        except (TypeError, ValueError, RecursionError) as exc:
            raise ValueError(f"payload is not JSON-serializable: {exc}") from exc

        with self._lock:
            target = self.get_ping_file(ping_id)
            if not replace and target.exists():
                self._log_duplicate(ping_id)
                raise DuplicatePingError(ping_id)
            self._publish(ping_id, target, document, replace)

        self._log.log_event(
            "ping_stored",
            ping_id=ping_id,
            url_path=ping.url_path,
            size=len(document),
            replaced=replace,
        )

    def _publish(self, ping_id: int, target: Path, document: str, replace: bool) -> None:
        """Write *document* to a temp file beside *target*, then move it into place.

        Without *replace* the temp file is hard-linked to *target*, which
        fails if *target* exists, so a ping published meanwhile by another
        store or process is never overwritten.  With *replace* it is renamed
        over *target*.  The temp name is removed in both cases.
        """
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX, dir=self._root
            )
        except OSError as exc:
            self._log_write_failure(ping_id, exc)
            raise StorageWriteFailed(ping_id, str(exc)) from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(document)
                fh.flush()
                if self._config.fsync:
                    os.fsync(fh.fileno())
            if replace:
                os.replace(tmp_name, target)
            else:
                os.link(tmp_name, target)
        except FileExistsError as exc:
            self._log_duplicate(ping_id)
            raise DuplicatePingError(ping_id) from exc
        except OSError as exc:
            self._log_write_failure(ping_id, exc)
            raise StorageWriteFailed(ping_id, str(exc)) from exc
        finally:
            self._discard_temp(tmp_name)

    def _log_duplicate(self, ping_id: int) -> None:
        self._log.log_event(
            "ping_store_failed",
            level=logging.WARNING,
            ping_id=ping_id,
            reason="duplicate",
        )

    def _log_write_failure(self, ping_id: int, exc: OSError) -> None:
        self._log.log_event(
            "ping_store_failed",
            level=logging.ERROR,
            ping_id=ping_id,
            reason=str(exc),
        )

    def _discard_temp(self, tmp_name: str) -> None:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        except OSError as exc:
            self._log.log_event(
                "temp_file_cleanup_failed",
                level=logging.WARNING,
                path=tmp_name,
                reason=str(exc),
            )

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def _list_names(self) -> List[str]:
        try:
            return os.listdir(self._root)
        except OSError as exc:
            raise StorageUnavailable(str(self._root), str(exc)) from exc

    def stored_ids(self) -> List[int]:
        return sorted(id_from_filename(n) for n in self._list_names() if is_ping_filename(n))

    def get_all_pings(self) -> List[TelemetryPing]:
        """Read every ping file in the directory.

        Files that are not ping files are ignored.  Ping files that cannot
        be parsed are handled according to ``config.malformed_policy``;
        they never abort the enumeration.  The problems found by the most
        recent call are available from :attr:`skipped`.
        """
        pings: List[TelemetryPing] = []
        skipped: List[StorageReadSkipped] = []

        for name in self._list_names():
            if not is_ping_filename(name):
                continue
            ping_id = id_from_filename(name)
            path = self._root / name
            try:
                with open(path, encoding="utf-8") as fh:
                    data = json.load(fh)
                ping = TelemetryPing.from_dict(ping_id, data)
            except FileNotFoundError:
                continue  # deleted by a concurrent prune or acknowledgment
            except (ValueError, RecursionError) as exc:
                self._on_malformed(path, ping_id, str(exc), skipped, quarantine=True)
                continue
            except OSError as exc:
                self._on_malformed(path, ping_id, str(exc), skipped, quarantine=False)
                continue
            pings.append(ping)

        self._skipped = skipped
        return pings

    def _on_malformed(
        self,
        path: Path,
        ping_id: int,
        reason: str,
        skipped: List[StorageReadSkipped],
        quarantine: bool,
    ) -> None:
        policy = self._config.malformed_policy
        if policy is MalformedPingPolicy.SKIP:
            return

        skipped.append(StorageReadSkipped(path.name, reason, ping_id=ping_id))
        self._log.log_event(
            "ping_read_skipped",
            level=logging.WARNING,
            ping_id=ping_id,
            filename=path.name,
            reason=reason,
        )

        if policy is MalformedPingPolicy.QUARANTINE and quarantine:
            try:
                destination = self._quarantine(path)
            except OSError as exc:
                self._log.log_event(
                    "ping_quarantine_failed",
                    level=logging.WARNING,
                    ping_id=ping_id,
                    reason=str(exc),
                )
                return
            self._log.log_event(
                "ping_quarantined",
                level=logging.WARNING,
                ping_id=ping_id,
                filename=destination.name,
            )

    @staticmethod
    def _quarantine(path: Path) -> Path:
        """Move *path* to the first free ``<name>[.N].corrupt`` beside it.

        Linking fails on an existing name, so earlier quarantined copies of
        the same ping are kept.
        """
        attempt = 0
        while True:
            infix = f".{attempt}" if attempt else ""
            destination = path.with_name(f"{path.name}{infix}{QUARANTINE_SUFFIX}")
            try:
                os.link(path, destination)
            except FileExistsError:
                attempt += 1
                continue
            os.unlink(path)
            return destination

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def _delete(self, ping_id: int) -> Tuple[DeleteStatus, str]:
        """Delete one ping file.  An already-missing file is not an error."""
        try:
            os.unlink(self.get_ping_file(ping_id))
        except FileNotFoundError:
            return DeleteStatus.ABSENT, ""
        except OSError as exc:
            self._log.log_event(
                "ping_delete_failed",
                level=logging.WARNING,
                ping_id=ping_id,
                reason=str(exc),
            )
            return DeleteStatus.FAILED, str(exc)
        return DeleteStatus.REMOVED, ""

    def remove_stale_temp_files(self) -> List[str]:
        """Delete temp files older than ``config.stale_temp_seconds``.

        Younger temp files may belong to a write still in flight in
        another store or process and are left alone.  Returns the names
        removed.
        """
        cutoff = time.time() - self._config.stale_temp_seconds
        removed: List[str] = []
        for name in self._list_names():
            if not (name.startswith(TEMP_PREFIX) and name.endswith(TEMP_SUFFIX)):
                continue
            path = self._root / name
            try:
                if path.stat().st_mtime > cutoff:
                    continue
                os.unlink(path)
            except FileNotFoundError:
                continue
            except OSError as exc:
                self._log.log_event(
                    "temp_file_cleanup_failed",
                    level=logging.WARNING,
                    path=name,
                    reason=str(exc),
                )
                continue
            removed.append(name)

        if removed:
            self._log.log_event("stale_temp_files_removed", files=sorted(removed))
        return removed

    def prune(self, max_count: Optional[int] = None) -> BatchResult:
        """Evict the smallest-ID pings until at most *max_count* remain.

        *max_count* defaults to ``config.max_ping_count``.  Deletion is
        best-effort: a file that cannot be removed is reported in the
        result's ``failures`` and the remaining evictions still run.
        Temp files left by interrupted writes are removed first once they
        are older than ``config.stale_temp_seconds``.
        """
        limit = self._resolve_max_count(max_count)
        result = BatchResult()

        with self._lock:
            self.remove_stale_temp_files()
            ids = self.stored_ids()
            excess = len(ids) - limit
            if excess <= 0:
                return result
            for ping_id in ids[:excess]:
                result.add(ping_id, *self._delete(ping_id))

        self._log.log_event(
            "prune_complete",
            level=logging.INFO if result.ok else logging.WARNING,
            max_count=limit,
            stored_before=len(ids),
            removed=result.removed_count,
            failed=result.failed_ids,
        )
        return result

    def on_upload_attempt_complete(self, succeeded_ids: Iterable[int]) -> BatchResult:
        """Delete the pings whose IDs were delivered.

        IDs that are not stored are ignored.  Pings not listed are left
        alone whatever their age.  Each deletion is attempted even if an
        earlier one failed.
        """
        ids = self._normalize_ids(succeeded_ids)
        result = BatchResult()

        with self._lock:
            for ping_id in ids:
                if ping_id < 0:
                    result.add(ping_id, DeleteStatus.ABSENT)
                    continue
                result.add(ping_id, *self._delete(ping_id))

        self._log.log_event(
            "upload_acknowledged",
            level=logging.INFO if result.ok else logging.WARNING,
            removed=result.removed,
            absent=result.absent,
            failed=result.failed_ids,
        )
        return result

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------

    @property
    def root_dir(self) -> Path:
        return self._root

    @property
    def skipped(self) -> List[StorageReadSkipped]:
        """Malformed files reported by the most recent :meth:`get_all_pings`."""
        return list(self._skipped)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self._root)!r})"
