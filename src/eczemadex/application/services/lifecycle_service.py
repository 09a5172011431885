from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Callable

from eczemadex.core.config import AppPaths
from eczemadex.core.errors import SnapshotRestoreError, SnapshotWriteRefusedError
from eczemadex.core.time import now_utc
from eczemadex.infrastructure.snapshot.snapshot_adapter import SnapshotAdapter
from eczemadex.infrastructure.store.resource_store import ResourceStore

logger = logging.getLogger(__name__)


class RestoreStatus(str, Enum):
    NOT_STARTED = "not_started"
    FRESH = "fresh"
    RESTORED = "restored"
    RESTORE_FAILED = "restore_failed"


class StoreLifecycle:
    """Owns the process-wide ResourceStore between startup and shutdown."""

    def __init__(
        self,
        paths: AppPaths,
        adapter: SnapshotAdapter | None = None,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self.paths = paths
        self.adapter = adapter or SnapshotAdapter(clock=clock)
        self._clock = clock
        self._store = ResourceStore(clock=clock)
        self.status = RestoreStatus.NOT_STARTED
        self.last_error: str | None = None

    @property
    def store(self) -> ResourceStore:
        return self._store

    @property
    def restore_failed(self) -> bool:
        return self.status is RestoreStatus.RESTORE_FAILED

    def after_startup(self) -> ResourceStore:
        snapshot_path = self.paths.snapshot_path
        if not snapshot_path.exists():
            self._store = ResourceStore(clock=self._clock)
            self.status = RestoreStatus.FRESH
            self.last_error = None
            logger.info("No snapshot at %s; starting with an empty store", snapshot_path)
            return self._store

        try:
            store = self.adapter.read_snapshot(snapshot_path)
        except Exception as exc:
            failure = exc if isinstance(exc, SnapshotRestoreError) else SnapshotRestoreError(
                f"Unexpected error restoring {snapshot_path}: {exc!r}"
            )
            self._store = ResourceStore(clock=self._clock)
            self.status = RestoreStatus.RESTORE_FAILED
            self.last_error = str(failure)
            logger.critical("Snapshot restore failed for %s: %s", snapshot_path, failure)
            if failure is exc:
                raise
            raise failure from exc

        self._store = store
        self.status = RestoreStatus.RESTORED
        self.last_error = None
        return self._store

    def before_shutdown(self) -> None:
        if self.restore_failed:
            raise SnapshotWriteRefusedError(
                f"Refusing to overwrite {self.paths.snapshot_path}: the previous restore failed "
                f"({self.last_error})"
            )
        self.adapter.write_snapshot(self._store, self.paths.snapshot_path)
