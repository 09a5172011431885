from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Callable, Iterator

from eczemadex.core.errors import InvalidInputError, NotFoundError
from eczemadex.core.time import now_utc
from eczemadex.domain.models.resource import (
    Resource,
    ResourceCategory,
    ResourcePatch,
    validate_description,
    validate_title,
)

FIRST_ID = 1
_CLOCK_STEP = timedelta(microseconds=1)


@dataclass(slots=True)
class StoreState:
    next_id: int = FIRST_ID
    resources: list[Resource] = field(default_factory=list)


class ResourceStore:
    """In-memory index of resources keyed by store-assigned id.

    Every operation runs under one re-entrant lock, so mutations never
    overlap each other or a read. Records never leave the store: every
    method hands back copies.
    """

    def __init__(self, clock: Callable[[], datetime] = now_utc) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._resources: dict[int, Resource] = {}
        self._next_id = FIRST_ID

    @classmethod
    def from_state(cls, state: StoreState, clock: Callable[[], datetime] = now_utc) -> ResourceStore:
        """Rebuild a store from captured state. Callers validate the state first."""
        store = cls(clock=clock)
        for resource in sorted(state.resources, key=lambda r: r.id):
            store._resources[resource.id] = replace(resource)
        store._next_id = state.next_id
        return store

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id

    def count(self) -> int:
        with self._lock:
            return len(self._resources)

    @contextmanager
    def frozen(self) -> Iterator[ResourceStore]:
        """Hold the gate so no other operation runs until the block exits."""
        with self._lock:
            yield self

    def export_state(self) -> StoreState:
        with self._lock:
            return StoreState(
                next_id=self._next_id,
                resources=[replace(r) for r in self._ordered()],
            )

    def create(
        self,
        title: str,
        description: str,
        category: ResourceCategory | str,
    ) -> Resource:
        title = validate_title(title)
        description = validate_description(description)
        parsed_category = ResourceCategory.parse(category)

        with self._lock:
            resource_id = self._next_id
            timestamp = self._clock()
            resource = Resource(
                id=resource_id,
                title=title,
                description=description,
                category=parsed_category,
                created_at=timestamp,
                updated_at=timestamp,
                verified=False,
            )
            self._resources[resource_id] = resource
            self._next_id = resource_id + 1
            return replace(resource)

    def get(self, resource_id: int) -> Resource:
        with self._lock:
            return replace(self._require(resource_id))

    def list(self) -> list[Resource]:
        with self._lock:
            return [replace(r) for r in self._ordered()]

    def list_by_category(self, category: ResourceCategory | str) -> list[Resource]:
        wanted = ResourceCategory.parse(category)
        with self._lock:
            return [replace(r) for r in self._ordered() if r.category is wanted]

    def update(self, resource_id: int, patch: ResourcePatch) -> Resource:
        with self._lock:
            resource = self._require(resource_id)

            # Validate every provided field before touching the record.
            title = validate_title(patch.title) if patch.title is not None else None
            description = (
                validate_description(patch.description) if patch.description is not None else None
            )
            category = ResourceCategory.parse(patch.category) if patch.category is not None else None

            if title is not None:
                resource.title = title
            if description is not None:
                resource.description = description
            if category is not None:
                resource.category = category
            resource.updated_at = self._tick(resource.updated_at)
            return replace(resource)

    def delete(self, resource_id: int) -> None:
        with self._lock:
            self._require(resource_id)
            del self._resources[resource_id]

    def verify(self, resource_id: int) -> Resource:
        with self._lock:
            resource = self._require(resource_id)
            resource.verified = True
            resource.updated_at = self._tick(resource.updated_at)
            return replace(resource)

    def search(self, query: str) -> list[Resource]:
        if not isinstance(query, str):
            raise InvalidInputError("Search query must be text.")
        needle = query.lower()
        with self._lock:
            if not needle:
                return [replace(r) for r in self._ordered()]
            return [
                replace(r)
                for r in self._ordered()
                if needle in r.title.lower() or needle in r.description.lower()
            ]

    def _require(self, resource_id: int) -> Resource:
        resource = self._resources.get(resource_id)
        if resource is None:
            raise NotFoundError(resource_id)
        return resource

    def _ordered(self) -> list[Resource]:
        return [self._resources[key] for key in sorted(self._resources)]

    def _tick(self, previous: datetime) -> datetime:
        # updated_at must move strictly forward even when the clock has not.
        timestamp = self._clock()
        if timestamp <= previous:
            timestamp = previous + _CLOCK_STEP
        return timestamp
