"""
API Dependencies

FastAPI dependency injection functions for:
- Settings access
- Resource store access
- Request context setup
"""

import uuid
from typing import AsyncGenerator, Optional

from fastapi import Header, Request

from config_server.config.settings import Settings
from config_server.data.storage import ResourceStore
from config_server.monitoring import clear_request_context, set_request_context


def get_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_resource_store(request: Request) -> ResourceStore:
    """
    Resource store owned by the running application.

    The store lives on `app.state` rather than in a module global, so each
    application instance (one per test) has its own.
    """
    return request.app.state.store


async def setup_request_context(
    request: Request,
    x_request_id: Optional[str] = Header(None)
) -> AsyncGenerator[dict, None]:
    """
    Setup request context for logging.

    Reuses the id assigned by the error handler middleware; otherwise uses
    the X-Request-ID header when supplied, or generates one.

    Yields:
        dict: Request context information
    """
    request_id = (
        getattr(request.state, "request_id", None)
        or x_request_id
        or str(uuid.uuid4())
    )

    set_request_context(request_id=request_id)
    request.state.request_id = request_id

    try:
        yield {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }
    finally:
        clear_request_context()
