from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from rich.console import Console

from eczemadex.application.services.lifecycle_service import StoreLifecycle
from eczemadex.application.services.resource_service import ResourceService
from eczemadex.core.config import AppPaths
from eczemadex.infrastructure.snapshot.home_lock import HomeLock


@dataclass(slots=True)
class CLIContext:
    paths: AppPaths
    console: Console

    @contextmanager
    def resource_service(self, persist: bool = False) -> Iterator[ResourceService]:
        """Restore the store, yield a service over it, and snapshot afterwards if persist is set.

        The home lock is held for the whole cycle so no other process can
        restore the same snapshot in between.
        """
        with HomeLock(self.paths.lock_path):
            lifecycle = StoreLifecycle(self.paths)
            lifecycle.after_startup()
            yield ResourceService(lifecycle.store)
            if persist:
                lifecycle.before_shutdown()
