"""
API Router

Aggregates the resource routers into a single router for the app.
"""

from fastapi import APIRouter

from .endpoints import config_router, text_router

api_router = APIRouter()

# JSON resources (/config)
api_router.include_router(config_router)

# Plain-text resources (/text)
api_router.include_router(text_router)
