"""
API Endpoints

Routers for JSON (/config) and plain-text (/text) resources.
"""

from .resources import config_router, text_router, create_resource_router

__all__ = [
    'config_router',
    'text_router',
    'create_resource_router',
]
