"""Exclusive per-home lock.

Only one process may own a data directory at a time: the holder restores the
snapshot, runs operations and writes the snapshot back before releasing.
Uses fcntl.flock on Unix and msvcrt.locking on Windows.
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path
from types import TracebackType
from typing import IO

from eczemadex.core.errors import StoreLockedError
from eczemadex.core.files import ensure_directory

logger = logging.getLogger(__name__)


class HomeLock:
    def __init__(self, lock_path: Path) -> None:
        self.lock_path = lock_path
        self._handle: IO[str] | None = None

    @property
    def held(self) -> bool:
        return self._handle is not None

    def acquire(self) -> None:
        if self._handle is not None:
            return
        ensure_directory(self.lock_path.parent)
        handle = self.lock_path.open("a", encoding="utf-8")
        try:
            if platform.system() == "Windows":
                _lock_windows(handle)
            else:
                _lock_unix(handle)
        except BaseException:
            handle.close()
            raise
        self._handle = handle
        logger.debug("Acquired lock on %s", self.lock_path)

    def release(self) -> None:
        handle = self._handle
        if handle is None:
            return
        self._handle = None
        try:
            if platform.system() == "Windows":
                _unlock_windows(handle)
            else:
                _unlock_unix(handle)
        finally:
            handle.close()
        logger.debug("Released lock on %s", self.lock_path)

    def __enter__(self) -> HomeLock:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()


def _locked_error(handle: IO[str]) -> StoreLockedError:
    return StoreLockedError(
        f"Data directory is in use by another process (lock held on {handle.name})"
    )


def _lock_unix(handle: IO[str]) -> None:
    import fcntl

    try:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
    except BlockingIOError as exc:
        raise _locked_error(handle) from exc


def _unlock_unix(handle: IO[str]) -> None:
    import fcntl

    fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


def _lock_windows(handle: IO[str]) -> None:
    import msvcrt

    handle.seek(0)
    try:
        msvcrt.locking(handle.fileno(), msvcrt.LK_NBLCK, 1)
    except OSError as exc:
        # 13 (permission denied) and 36 (deadlock avoided) mean the lock is taken.
        if exc.errno in (13, 36):
            raise _locked_error(handle) from exc
        raise


def _unlock_windows(handle: IO[str]) -> None:
    import msvcrt

    handle.seek(0)
    msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)
