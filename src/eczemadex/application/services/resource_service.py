from __future__ import annotations

import logging

from eczemadex.domain.models.resource import Resource, ResourceCategory, ResourcePatch
from eczemadex.infrastructure.store.resource_store import ResourceStore

logger = logging.getLogger(__name__)


class ResourceService:
    def __init__(self, store: ResourceStore) -> None:
        self.store = store

    def create_resource(
        self,
        title: str,
        description: str,
        category: ResourceCategory | str,
    ) -> Resource:
        resource = self.store.create(title, description, category)
        logger.info("Created resource %d (%s)", resource.id, resource.category.value)
        return resource

    def get_resource(self, resource_id: int) -> Resource:
        return self.store.get(resource_id)

    def list_resources(self) -> list[Resource]:
        return self.store.list()

    def list_resources_by_category(self, category: ResourceCategory | str) -> list[Resource]:
        return self.store.list_by_category(category)

    def update_resource(self, resource_id: int, patch: ResourcePatch) -> Resource:
        resource = self.store.update(resource_id, patch)
        logger.info("Updated resource %d", resource_id)
        return resource

    def delete_resource(self, resource_id: int) -> None:
        self.store.delete(resource_id)
        logger.info("Deleted resource %d", resource_id)

    def verify_resource(self, resource_id: int) -> Resource:
        resource = self.store.verify(resource_id)
        logger.info("Verified resource %d", resource_id)
        return resource

    def search_resources(self, query: str) -> list[Resource]:
        return self.store.search(query)
