from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from eczemadex.core.errors import ConfigurationError


@dataclass(frozen=True)
class AppPaths:
    home_dir: Path
    snapshot_path: Path
    lock_path: Path


@dataclass(frozen=True)
class Settings:
    admin_token: str | None


DEFAULT_HOME_DIRNAME = ".eczemadex"
SNAPSHOT_FILENAME = "snapshot.json"
LOCK_FILENAME = ".lock"


def load_paths(home: Path | None = None) -> AppPaths:
    if home is not None:
        home_dir = home.expanduser().resolve()
    else:
        home_raw = os.getenv("ECZEMADEX_HOME")
        if home_raw:
            home_dir = Path(home_raw).expanduser().resolve()
        else:
            home_dir = Path.cwd().resolve() / DEFAULT_HOME_DIRNAME

    if home_dir.exists() and not home_dir.is_dir():
        raise ConfigurationError(f"Data directory is not a directory: {home_dir}")

    return AppPaths(
        home_dir=home_dir,
        snapshot_path=home_dir / SNAPSHOT_FILENAME,
        lock_path=home_dir / LOCK_FILENAME,
    )


def load_settings() -> Settings:
    token = (os.getenv("ECZEMADEX_ADMIN_TOKEN") or "").strip()
    return Settings(admin_token=token or None)
