from __future__ import annotations

import os
from pathlib import Path

import pytest

from eczemadex.core.files import write_bytes_atomic


def test_write_bytes_atomic_replaces_target(tmp_path: Path) -> None:
    target = tmp_path / "out" / "snapshot.json"
    write_bytes_atomic(target, b"first")
    write_bytes_atomic(target, b"second")

    assert target.read_bytes() == b"second"
    assert sorted(p.name for p in target.parent.iterdir()) == ["snapshot.json"]


def test_failed_write_removes_temp_file(tmp_path: Path, monkeypatch) -> None:
    target = tmp_path / "snapshot.json"
    target.write_bytes(b"previous")

    def _broken_fsync(fd: int) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(os, "fsync", _broken_fsync)
    with pytest.raises(OSError, match="disk full"):
        write_bytes_atomic(target, b"replacement")

    assert target.read_bytes() == b"previous"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["snapshot.json"]
