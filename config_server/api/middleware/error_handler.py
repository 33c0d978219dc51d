"""
Global Error Handler Middleware - API Layer

Maps store failures and unexpected exceptions to sanitized JSON error
responses:

    MissingIdentifierError / InvalidIdentifierError / InvalidContentError -> 400
    ResourceNotFoundError                                                  -> 404
    ResourceExistsError                                                    -> 409
    StorageInternalError / anything else                                   -> 500

Response body:

    {"error": {"code": 404, "message": "...", "type": "ResourceNotFoundError", "hint": "..."}}

Server errors never expose exception text; the full detail goes to the log.
"""

import uuid
from typing import Any, Callable, Dict, Optional, Tuple

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from config_server.exceptions import StoreError
from config_server.monitoring import (
    clear_request_context,
    get_logger,
    set_request_context,
)

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred processing your request"


class ErrorHandlerConfig:
    """Configuration for error handler."""

    def __init__(
        self,
        sanitize_errors: bool = True,
        log_errors: bool = True,
        custom_error_messages: Optional[Dict[int, str]] = None
    ):
        """
        Initialize error handler configuration.

        Args:
            sanitize_errors: Replace server error messages with a generic one
            log_errors: Log unexpected errors
            custom_error_messages: Hints for HTTP status codes
        """
        self.sanitize_errors = sanitize_errors
        self.log_errors = log_errors
        self.custom_error_messages = custom_error_messages or self._default_messages()

    @staticmethod
    def _default_messages() -> Dict[int, str]:
        return {
            400: "Invalid request",
            404: "Resource not found",
            405: "Method not allowed",
            409: "Conflict",
            500: "Internal server error",
        }


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware for global error handling.

    Store errors were already recorded by the store when raised; only
    unexpected exceptions are logged here.
    """

    def __init__(
        self,
        app: ASGIApp,
        config: Optional[ErrorHandlerConfig] = None
    ):
        super().__init__(app)
        self.config = config or ErrorHandlerConfig()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # The endpoint runs in a child task; its context changes never reach here
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        set_request_context(request_id=request_id)

        try:
            return await call_next(request)
        except Exception as e:
            return self._handle_error(request, e)
        finally:
            clear_request_context()

    def _handle_error(self, request: Request, error: Exception) -> JSONResponse:
        status_code, error_message, error_type = self._classify_error(error)

        if self.config.log_errors and not isinstance(error, StoreError):
            logger.error(
                f"Unhandled error on {request.method} {request.url.path}",
                exc_info=error,
                request_id=request.state.request_id,
                status_code=status_code,
                error_type=error_type
            )

        return JSONResponse(
            status_code=status_code,
            content=self._build_error_response(status_code, error_message, error_type)
        )

    def _classify_error(self, error: Exception) -> Tuple[int, str, str]:
        """
        Classify error and determine status code and message.

        Returns:
            Tuple of (status_code, message, error_type)
        """
        error_type = type(error).__name__

        if isinstance(error, StoreError):
            status_code = error.status_code
            message = error.message
        else:
            status_code = 500
            message = str(error)

        if status_code >= 500 and self.config.sanitize_errors:
            message = GENERIC_ERROR_MESSAGE

        return status_code, message, error_type

    def _build_error_response(
        self,
        status_code: int,
        error_message: str,
        error_type: str
    ) -> Dict[str, Any]:
        response = {
            "error": {
                "code": status_code,
                "message": error_message,
                "type": error_type
            }
        }

        if status_code in self.config.custom_error_messages:
            response["error"]["hint"] = self.config.custom_error_messages[status_code]

        return response


def create_error_handler_middleware(config: Optional[ErrorHandlerConfig] = None):
    """
    Create error handler middleware factory.

    Returns:
        Middleware class and kwargs for FastAPI
    """
    return (ErrorHandlerMiddleware, {"config": config or ErrorHandlerConfig()})
