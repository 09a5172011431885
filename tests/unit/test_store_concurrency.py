from __future__ import annotations

import threading

from eczemadex.domain.models.resource import ResourceCategory
from eczemadex.infrastructure.snapshot.snapshot_adapter import SnapshotAdapter
from eczemadex.infrastructure.store.resource_store import ResourceStore


def test_parallel_creates_get_distinct_ids() -> None:
    store = ResourceStore()
    ids: list[int] = []
    ids_lock = threading.Lock()

    def _writer(worker: int) -> None:
        for n in range(50):
            resource = store.create(f"Tip {worker}-{n}", "", ResourceCategory.PREVENTION)
            with ids_lock:
                ids.append(resource.id)

    threads = [threading.Thread(target=_writer, args=(w,)) for w in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert sorted(ids) == list(range(1, 401))
    assert store.next_id == 401
    assert [r.id for r in store.list()] == list(range(1, 401))


def test_frozen_store_blocks_writers_until_released() -> None:
    store = ResourceStore()
    store.create("Oatmeal Baths", "", ResourceCategory.TREATMENT)
    finished = threading.Event()

    def _writer() -> None:
        store.create("Wet wraps", "", ResourceCategory.TREATMENT)
        finished.set()

    with store.frozen():
        t = threading.Thread(target=_writer)
        t.start()
        assert not finished.wait(timeout=0.2)
        blob = SnapshotAdapter().snapshot(store)

    t.join(timeout=5)
    assert finished.is_set()
    assert SnapshotAdapter().restore(blob).count() == 1
    assert store.count() == 2
