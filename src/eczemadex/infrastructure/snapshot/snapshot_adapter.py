from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from eczemadex.core.errors import EczemaError, SnapshotError, SnapshotRestoreError
from eczemadex.core.files import write_bytes_atomic
from eczemadex.core.hashing import compute_bytes_digest
from eczemadex.core.time import now_utc, parse_iso, to_iso
from eczemadex.domain.models.resource import (
    Resource,
    ResourceCategory,
    validate_description,
    validate_title,
)
from eczemadex.infrastructure.store.resource_store import FIRST_ID, ResourceStore, StoreState

logger = logging.getLogger(__name__)

SNAPSHOT_FORMAT = "eczemadex-snapshot"
SCHEMA_VERSION = 1


class SnapshotAdapter:
    """Serializes a ResourceStore to a checksummed JSON blob and back.

    Restore is all-or-nothing: the blob is fully decoded and validated into a
    fresh store before anything is returned, and any defect raises
    SnapshotRestoreError.
    """

    def __init__(self, clock: Callable[[], datetime] = now_utc) -> None:
        self._clock = clock

    def snapshot(self, store: ResourceStore) -> bytes:
        with store.frozen():
            state = store.export_state()
        payload = _state_to_dict(state)
        envelope = {
            "format": SNAPSHOT_FORMAT,
            "schema_version": SCHEMA_VERSION,
            "checksum": _checksum(payload),
            "state": payload,
        }
        return json.dumps(envelope, ensure_ascii=False, indent=2).encode("utf-8")

    def restore(self, blob: bytes) -> ResourceStore:
        try:
            envelope = json.loads(blob.decode("utf-8"))
        except (UnicodeDecodeError, ValueError, RecursionError) as exc:
            # JSONDecodeError is a ValueError; so are over-long integer literals.
            raise SnapshotRestoreError(f"Snapshot is not valid UTF-8 JSON: {exc!r}") from exc

        if not isinstance(envelope, dict):
            raise SnapshotRestoreError("Snapshot root must be a JSON object")
        if envelope.get("format") != SNAPSHOT_FORMAT:
            raise SnapshotRestoreError(f"Unrecognized snapshot format: {envelope.get('format')!r}")
        version = envelope.get("schema_version")
        if version != SCHEMA_VERSION:
            raise SnapshotRestoreError(
                f"Unsupported snapshot schema version {version!r} (expected {SCHEMA_VERSION})"
            )

        payload = envelope.get("state")
        if not isinstance(payload, dict):
            raise SnapshotRestoreError("Snapshot is missing its state object")
        if envelope.get("checksum") != _checksum(payload):
            raise SnapshotRestoreError("Snapshot checksum mismatch; the file is corrupt")

        state = _state_from_dict(payload)
        return ResourceStore.from_state(state, clock=self._clock)

    def write_snapshot(self, store: ResourceStore, path: Path) -> None:
        blob = self.snapshot(store)
        try:
            write_bytes_atomic(path, blob)
        except OSError as exc:
            raise SnapshotError(f"Unable to write snapshot to {path}: {exc}") from exc
        logger.info("Wrote snapshot of %d resources to %s", store.count(), path)

    def read_snapshot(self, path: Path) -> ResourceStore:
        try:
            blob = path.read_bytes()
        except OSError as exc:
            raise SnapshotRestoreError(f"Unable to read snapshot {path}: {exc}") from exc
        store = self.restore(blob)
        logger.info("Restored %d resources from %s", store.count(), path)
        return store


def _checksum(payload: dict[str, Any]) -> str:
    canonical = json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    return compute_bytes_digest(canonical.encode("utf-8"))


def _state_to_dict(state: StoreState) -> dict[str, Any]:
    return {
        "next_id": state.next_id,
        "resources": [
            {
                "id": r.id,
                "title": r.title,
                "description": r.description,
                "category": r.category.value,
                "created_at": to_iso(r.created_at),
                "updated_at": to_iso(r.updated_at),
                "verified": r.verified,
            }
            for r in state.resources
        ],
    }


def _state_from_dict(payload: dict[str, Any]) -> StoreState:
    next_id = payload.get("next_id")
    if not _is_int(next_id) or next_id < FIRST_ID:
        raise SnapshotRestoreError(f"Invalid next_id in snapshot: {next_id!r}")

    rows = payload.get("resources")
    if not isinstance(rows, list):
        raise SnapshotRestoreError("Snapshot resources must be a list")

    resources: list[Resource] = []
    seen: set[int] = set()
    for index, row in enumerate(rows):
        resource = _resource_from_row(index, row)
        if resource.id in seen:
            raise SnapshotRestoreError(f"Duplicate resource id in snapshot: {resource.id}")
        if resource.id >= next_id:
            raise SnapshotRestoreError(
                f"Resource id {resource.id} is not below the snapshot next_id {next_id}"
            )
        seen.add(resource.id)
        resources.append(resource)

    return StoreState(next_id=next_id, resources=resources)


def _resource_from_row(index: int, row: Any) -> Resource:
    if not isinstance(row, dict):
        raise SnapshotRestoreError(f"Snapshot resource #{index} is not an object")

    resource_id = row.get("id")
    if not _is_int(resource_id) or resource_id < FIRST_ID:
        raise SnapshotRestoreError(f"Snapshot resource #{index} has an invalid id: {resource_id!r}")
    verified = row.get("verified")
    if not isinstance(verified, bool):
        raise SnapshotRestoreError(f"Resource {resource_id} has a non-boolean verified flag")

    try:
        title = validate_title(row.get("title"))
        description = validate_description(row.get("description"))
        category = ResourceCategory.parse(row.get("category"))
    except EczemaError as exc:
        raise SnapshotRestoreError(f"Resource {resource_id} is invalid: {exc}") from exc

    try:
        created_at = parse_iso(row["created_at"])
        updated_at = parse_iso(row["updated_at"])
    except (KeyError, TypeError, ValueError) as exc:
        raise SnapshotRestoreError(f"Resource {resource_id} has an invalid timestamp: {exc}") from exc
    if created_at > updated_at:
        raise SnapshotRestoreError(f"Resource {resource_id} was updated before it was created")

    return Resource(
        id=resource_id,
        title=title,
        description=description,
        category=category,
        created_at=created_at,
        updated_at=updated_at,
        verified=verified,
    )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
