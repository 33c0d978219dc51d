"""
Resource Endpoints

CRUD over one content kind, addressed by the `id` query parameter:

    GET    /config?id=app1   fetch  -> 200 raw stored body
    POST   /config?id=app1   create -> 201, 409 if it exists
    PUT    /config?id=app1   upsert -> 201 created / 200 replaced
    DELETE /config?id=app1   remove -> 204, 404 if absent

The same routes are mounted under /text for plain-text resources. Request
bodies are read raw and stored verbatim. Store errors propagate to the
error handler middleware, which maps them to status codes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from config_server.api.dependencies import get_resource_store, setup_request_context
from config_server.data.storage import ResourceKind, ResourceStore


def create_resource_router(kind: ResourceKind, prefix: str) -> APIRouter:
    """
    Build the CRUD router for one content kind.

    Args:
        kind: Content kind served by the router
        prefix: URL path, e.g. "/config"
    """
    router = APIRouter(prefix=prefix, tags=[f"{kind.value} resources"])

    @router.get("", summary=f"Fetch {kind.value} resource")
    async def fetch_resource(
        resource_id: Optional[str] = Query(None, alias="id"),
        _context: dict = Depends(setup_request_context),
        store: ResourceStore = Depends(get_resource_store)
    ) -> Response:
        resource = await store.fetch(kind, resource_id)
        return Response(content=resource.content, media_type=resource.media_type)

    @router.post("", status_code=status.HTTP_201_CREATED, summary=f"Create {kind.value} resource")
    async def create_resource(
        request: Request,
        resource_id: Optional[str] = Query(None, alias="id"),
        _context: dict = Depends(setup_request_context),
        store: ResourceStore = Depends(get_resource_store)
    ) -> Response:
        body = await request.body()
        await store.create(kind, resource_id, body)
        return Response(status_code=status.HTTP_201_CREATED)

    @router.put("", summary=f"Create or replace {kind.value} resource")
    async def upsert_resource(
        request: Request,
        resource_id: Optional[str] = Query(None, alias="id"),
        _context: dict = Depends(setup_request_context),
        store: ResourceStore = Depends(get_resource_store)
    ) -> Response:
        body = await request.body()
        resource = await store.upsert(kind, resource_id, body)
        if resource.created:
            return Response(status_code=status.HTTP_201_CREATED)
        return Response(status_code=status.HTTP_200_OK)

    @router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary=f"Delete {kind.value} resource")
    async def remove_resource(
        resource_id: Optional[str] = Query(None, alias="id"),
        _context: dict = Depends(setup_request_context),
        store: ResourceStore = Depends(get_resource_store)
    ) -> Response:
        await store.remove(kind, resource_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


config_router = create_resource_router(ResourceKind.JSON, "/config")
text_router = create_resource_router(ResourceKind.TEXT, "/text")
