"""
API Middleware Layer

Error handling for request processing.
"""

from .error_handler import (
    ErrorHandlerMiddleware,
    ErrorHandlerConfig,
    create_error_handler_middleware,
)

__all__ = [
    'ErrorHandlerMiddleware',
    'ErrorHandlerConfig',
    'create_error_handler_middleware',
]
