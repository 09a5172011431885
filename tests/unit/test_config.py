from pathlib import Path

import pytest

from eczemadex.core.config import load_paths, load_settings
from eczemadex.core.errors import ConfigurationError


def test_load_paths_prefers_explicit_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("ECZEMADEX_HOME", str(tmp_path / "from-env"))
    paths = load_paths(tmp_path / "explicit")
    assert paths.home_dir == (tmp_path / "explicit").resolve()
    assert paths.snapshot_path == paths.home_dir / "snapshot.json"


def test_load_paths_reads_env(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("ECZEMADEX_HOME", str(tmp_path / "from-env"))
    assert load_paths().home_dir == (tmp_path / "from-env").resolve()


def test_load_paths_defaults_to_cwd(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("ECZEMADEX_HOME", raising=False)
    monkeypatch.chdir(tmp_path)
    assert load_paths().home_dir == tmp_path.resolve() / ".eczemadex"


def test_admin_token_blank_means_disabled(monkeypatch) -> None:
    monkeypatch.setenv("ECZEMADEX_ADMIN_TOKEN", "   ")
    assert load_settings().admin_token is None
    monkeypatch.setenv("ECZEMADEX_ADMIN_TOKEN", "s3cret")
    assert load_settings().admin_token == "s3cret"


def test_load_paths_rejects_a_file_as_home(tmp_path: Path) -> None:
    not_a_dir = tmp_path / "home.txt"
    not_a_dir.write_text("", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_paths(not_a_dir)
