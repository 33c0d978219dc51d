"""
Monitoring Layer

Logging for the config server:
- Rolling daily log files with retention (audit trail)
- Console output in text or JSON
- Request ID context injection
"""

from .rolling import (
    RollingFileLogger,
    format_timestamp,
)

from .logging import (
    CategoryFormatter,
    JSONFormatter,
    ContextFilter,
    RollingFileHandler,
    StructuredLogger,
    configure_logging,
    configure_from_preset,
    get_logger,
    resolve_level,
    set_request_context,
    clear_request_context,
    get_request_id,
    LOGGING_PRESETS,
)

__all__ = [
    # Rolling files
    'RollingFileLogger',
    'format_timestamp',

    # Logging
    'CategoryFormatter',
    'JSONFormatter',
    'ContextFilter',
    'RollingFileHandler',
    'StructuredLogger',
    'configure_logging',
    'configure_from_preset',
    'get_logger',
    'resolve_level',
    'set_request_context',
    'clear_request_context',
    'get_request_id',
    'LOGGING_PRESETS',
]
