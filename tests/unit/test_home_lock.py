from __future__ import annotations

from pathlib import Path

import pytest

from eczemadex.cli.main import main
from eczemadex.core.config import load_paths
from eczemadex.core.errors import StoreLockedError
from eczemadex.infrastructure.snapshot.home_lock import HomeLock


def test_second_holder_is_rejected_until_release(tmp_path: Path) -> None:
    lock_path = load_paths(tmp_path).lock_path

    with HomeLock(lock_path) as first:
        assert first.held
        with pytest.raises(StoreLockedError):
            HomeLock(lock_path).acquire()

    with HomeLock(lock_path) as again:
        assert again.held
    assert not again.held


def test_overlapping_cli_sessions_cannot_reuse_ids(tmp_path: Path, cli_context) -> None:
    ctx = cli_context(tmp_path)

    with ctx.resource_service(persist=True) as first:
        created = first.create_resource("Oatmeal Baths", "", "Treatment")
        with pytest.raises(StoreLockedError):
            with ctx.resource_service(persist=True):
                pass

    with ctx.resource_service(persist=True) as second:
        assert second.create_resource("Gluten Diet", "", "DietAdvice").id == created.id + 1
        assert [r.id for r in second.list_resources()] == [1, 2]


def test_cli_exits_with_one_while_home_is_locked(tmp_path: Path) -> None:
    with HomeLock(load_paths(tmp_path).lock_path):
        assert main(["--home", str(tmp_path), "add", "--title", "Wet wraps", "--category", "Treatment"]) == 1
    assert not (tmp_path / "snapshot.json").exists()
