from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import asdict, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any, AsyncIterator

from fastapi import FastAPI, Header, HTTPException, Query
from pydantic import BaseModel

from eczemadex.application.services.lifecycle_service import StoreLifecycle
from eczemadex.application.services.resource_service import ResourceService
from eczemadex.core.config import AppPaths, Settings, load_settings
from eczemadex.core.errors import (
    AlreadyExistsError,
    EczemaError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from eczemadex.core.time import to_iso
from eczemadex.domain.models.resource import ResourceCategory, ResourcePatch
from eczemadex.infrastructure.snapshot.home_lock import HomeLock


class CreateResourceRequest(BaseModel):
    title: str
    description: str = ""
    category: str


class UpdateResourceRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    category: str | None = None


def _jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return _jsonable(asdict(value))
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, datetime):
        return to_iso(value)
    if isinstance(value, Enum):
        return value.value
    return value


def _http_error(exc: EczemaError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvalidInputError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, AlreadyExistsError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, UnauthorizedError):
        return HTTPException(status_code=401, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


def create_app(
    paths: AppPaths,
    settings: Settings | None = None,
    lifecycle: StoreLifecycle | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    lifecycle = lifecycle or StoreLifecycle(paths)

    @asynccontextmanager
    async def _lifespan(_: FastAPI) -> AsyncIterator[None]:
        with HomeLock(paths.lock_path):
            lifecycle.after_startup()
            yield
            lifecycle.before_shutdown()

    app = FastAPI(title="Eczemadex", version="0.1.0", lifespan=_lifespan)
    app.state.lifecycle = lifecycle

    def get_resource_service() -> ResourceService:
        return ResourceService(lifecycle.store)

    def _require_admin(token: str | None) -> None:
        if settings.admin_token is None:
            return
        if token != settings.admin_token:
            raise UnauthorizedError("A valid X-Admin-Token header is required to verify resources.")

    @app.get("/api/health")
    def api_health() -> dict[str, Any]:
        store = lifecycle.store
        return {
            "ok": True,
            "status": lifecycle.status.value,
            "count": store.count(),
            "next_id": store.next_id,
        }

    @app.post("/api/resources", status_code=201)
    def api_create_resource(req: CreateResourceRequest) -> dict[str, Any]:
        try:
            resource = get_resource_service().create_resource(req.title, req.description, req.category)
        except EczemaError as exc:
            raise _http_error(exc) from exc
        return {"ok": True, "resource": _jsonable(resource)}

    @app.get("/api/resources")
    def api_list_resources(category: str | None = Query(default=None)) -> dict[str, Any]:
        service = get_resource_service()
        try:
            if category is None:
                resources = service.list_resources()
            else:
                resources = service.list_resources_by_category(ResourceCategory.parse(category))
        except EczemaError as exc:
            raise _http_error(exc) from exc
        return {"ok": True, "count": len(resources), "resources": _jsonable(resources)}

    @app.get("/api/resources/search")
    def api_search_resources(q: str = Query(default="")) -> dict[str, Any]:
        resources = get_resource_service().search_resources(q)
        return {"ok": True, "query": q, "count": len(resources), "resources": _jsonable(resources)}

    @app.get("/api/resources/{resource_id}")
    def api_get_resource(resource_id: int) -> dict[str, Any]:
        try:
            resource = get_resource_service().get_resource(resource_id)
        except EczemaError as exc:
            raise _http_error(exc) from exc
        return {"ok": True, "resource": _jsonable(resource)}

    @app.patch("/api/resources/{resource_id}")
    def api_update_resource(resource_id: int, req: UpdateResourceRequest) -> dict[str, Any]:
        patch = ResourcePatch(title=req.title, description=req.description, category=req.category)
        try:
            resource = get_resource_service().update_resource(resource_id, patch)
        except EczemaError as exc:
            raise _http_error(exc) from exc
        return {"ok": True, "resource": _jsonable(resource)}

    @app.delete("/api/resources/{resource_id}")
    def api_delete_resource(resource_id: int) -> dict[str, Any]:
        try:
            get_resource_service().delete_resource(resource_id)
        except EczemaError as exc:
            raise _http_error(exc) from exc
        return {"ok": True, "deleted": resource_id}

    @app.post("/api/resources/{resource_id}/verify")
    def api_verify_resource(
        resource_id: int,
        x_admin_token: str | None = Header(default=None),
    ) -> dict[str, Any]:
        try:
            _require_admin(x_admin_token)
            resource = get_resource_service().verify_resource(resource_id)
        except EczemaError as exc:
            raise _http_error(exc) from exc
        return {"ok": True, "resource": _jsonable(resource)}

    return app
