"""
FastAPI Application Factory

Creates and configures the FastAPI application with:
- Directory bootstrap (resource and log subdirectories)
- Logging (console + daily rolling files)
- Resource store construction
- Error handling middleware
- Resource routes and health endpoint
"""

import time
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from config_server.api.middleware import create_error_handler_middleware
from config_server.api.router import api_router
from config_server.config.settings import Settings, get_settings, prepare_directories
from config_server.data.storage import ResourceStore
from config_server.monitoring import configure_from_preset, get_logger

logger = get_logger(__name__)

PRESETS = {
    "production": "production",
    "test": "testing",
    "development": "development",
}


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Settings to use (loaded from environment if None)

    Returns:
        FastAPI: Configured application instance

    Raises:
        FileNotFoundError: If the data directory does not exist
    """
    settings = settings or get_settings()

    prepare_directories(settings)

    monitoring = settings.monitoring
    rolling_logger = configure_from_preset(
        PRESETS[settings.environment],
        level=monitoring.log_level,
        format_type=monitoring.log_format,
        enable_console=monitoring.console_enabled,
        log_dir=settings.log_dir,
        base_name=monitoring.log_base_name,
        retention_count=monitoring.log_retention_count,
    )

    logger.info(
        f"Creating {settings.app_name} (environment: {settings.environment}, "
        f"data: {settings.storage.data_dir})"
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="File-backed store for JSON and text resources",
        redirect_slashes=False
    )

    app.state.settings = settings
    app.state.rolling_logger = rolling_logger
    app.state.store = ResourceStore(
        settings.storage.data_dir,
        subdirectories=settings.subdirectories
    )
    app.state.started_at = time.time()

    # ==========================================================================
    # Middleware Configuration
    # ==========================================================================

    middleware_class, middleware_kwargs = create_error_handler_middleware()
    app.add_middleware(middleware_class, **middleware_kwargs)

    # ==========================================================================
    # Routes
    # ==========================================================================

    app.include_router(api_router)

    @app.get("/health")
    async def health_check():
        """Basic status and uptime."""
        return JSONResponse({
            "status": "ok",
            "timestamp": time.time(),
            "uptime_seconds": time.time() - app.state.started_at,
            "version": settings.app_version
        })

    return app
