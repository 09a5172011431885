from __future__ import annotations

from pathlib import Path

import pytest

from eczemadex.application.services.lifecycle_service import RestoreStatus, StoreLifecycle
from eczemadex.core.config import load_paths
from eczemadex.core.errors import SnapshotRestoreError, SnapshotWriteRefusedError
from eczemadex.domain.models.resource import ResourceCategory
from eczemadex.infrastructure.snapshot.snapshot_adapter import SnapshotAdapter
from eczemadex.infrastructure.store.resource_store import ResourceStore


def test_startup_without_snapshot_is_fresh(tmp_path: Path) -> None:
    lifecycle = StoreLifecycle(load_paths(tmp_path))
    store = lifecycle.after_startup()

    assert lifecycle.status is RestoreStatus.FRESH
    assert store.count() == 0
    assert store.next_id == 1


def test_shutdown_then_startup_restores_state(tmp_path: Path) -> None:
    paths = load_paths(tmp_path)

    first = StoreLifecycle(paths)
    first.after_startup()
    first.store.create("Oatmeal Baths", "", ResourceCategory.TREATMENT)
    first.store.create("Gluten Diet", "", ResourceCategory.DIET_ADVICE)
    first.store.delete(2)
    first.before_shutdown()

    second = StoreLifecycle(paths)
    store = second.after_startup()

    assert second.status is RestoreStatus.RESTORED
    assert [r.title for r in store.list()] == ["Oatmeal Baths"]
    assert store.create("Wet wraps", "", ResourceCategory.TREATMENT).id == 3


def test_corrupt_snapshot_fails_loudly_and_is_preserved(tmp_path: Path) -> None:
    paths = load_paths(tmp_path)
    paths.home_dir.mkdir(parents=True, exist_ok=True)
    paths.snapshot_path.write_bytes(b"{truncated")

    lifecycle = StoreLifecycle(paths)
    with pytest.raises(SnapshotRestoreError):
        lifecycle.after_startup()

    assert lifecycle.restore_failed
    assert lifecycle.status is RestoreStatus.RESTORE_FAILED
    assert lifecycle.last_error
    assert lifecycle.store.count() == 0
    assert lifecycle.store.next_id == 1

    with pytest.raises(SnapshotWriteRefusedError):
        lifecycle.before_shutdown()
    assert paths.snapshot_path.read_bytes() == b"{truncated"


def test_oversized_integer_in_snapshot_marks_restore_failed(tmp_path: Path) -> None:
    paths = load_paths(tmp_path)
    paths.home_dir.mkdir(parents=True, exist_ok=True)
    blob = b'{"format": "eczemadex-snapshot", "schema_version": 1, "state": {"next_id": 1' + b"0" * 5000 + b"}}"
    paths.snapshot_path.write_bytes(blob)

    lifecycle = StoreLifecycle(paths)
    with pytest.raises(SnapshotRestoreError):
        lifecycle.after_startup()

    assert lifecycle.status is RestoreStatus.RESTORE_FAILED
    with pytest.raises(SnapshotWriteRefusedError):
        lifecycle.before_shutdown()
    assert paths.snapshot_path.read_bytes() == blob


class _ExplodingAdapter(SnapshotAdapter):
    def read_snapshot(self, path: Path) -> ResourceStore:
        raise RuntimeError("disk on fire")


def test_unexpected_restore_error_is_wrapped_and_fatal(tmp_path: Path) -> None:
    paths = load_paths(tmp_path)
    paths.home_dir.mkdir(parents=True, exist_ok=True)
    paths.snapshot_path.write_text("{}", encoding="utf-8")

    lifecycle = StoreLifecycle(paths, adapter=_ExplodingAdapter())
    with pytest.raises(SnapshotRestoreError, match="disk on fire") as excinfo:
        lifecycle.after_startup()

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert lifecycle.restore_failed
    assert lifecycle.store.count() == 0
    assert lifecycle.store.next_id == 1
