"""
Structured Logging - Monitoring Layer

Provides logging for the config server with:
- Daily rolling log files with bounded retention (audit trail on disk)
- Text or JSON console output
- Request ID context injection
- Configurable log levels per module

File entries look like:

    [2024-05-01_13-45-12.07] [INFO] config_server.data.storage.local: Created json resource app1
    [2024-05-01_13-45-13.52] [ERROR] config_server.data.storage.local: Failed to read json resource app2
    Exception: Traceback (most recent call last): ...
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from contextvars import ContextVar
from pathlib import Path

from .rolling import RollingFileLogger

# Context variable for request tracking
request_id_ctx: ContextVar[Optional[str]] = ContextVar('request_id', default=None)

# .NET-style level names accepted from the LOG_LEVEL environment variable
LEVEL_ALIASES = {
    'TRACE': 'DEBUG',
    'INFORMATION': 'INFO',
    'NONE': 'CRITICAL',
}


def resolve_level(level: str) -> int:
    """
    Convert a level name to a logging constant.

    Unknown names fall back to INFO.
    """
    name = level.strip().upper()
    name = LEVEL_ALIASES.get(name, name)
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


class CategoryFormatter(logging.Formatter):
    """
    Formatter for rolling file entries.

    Renders `[LEVEL] category: message`, followed by an
    `Exception: ...` line when the record carries exception info.
    The timestamp prefix is added by RollingFileLogger.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = f"[{record.levelname}] {record.name}: {record.getMessage()}"

        if record.exc_info:
            if not record.exc_text:
                record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            message += f"\nException: {record.exc_text}"

        return message


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for console output.

    One JSON object per line, for log aggregation systems.
    """

    def __init__(self, include_traceback: bool = True):
        """
        Initialize JSON formatter.

        Args:
            include_traceback: Include exception traceback in output
        """
        super().__init__()
        self.include_traceback = include_traceback

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        request_id = request_id_ctx.get()
        if request_id:
            log_data['request_id'] = request_id

        if record.exc_info and self.include_traceback:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info),
            }

        if hasattr(record, 'extra_fields'):
            log_data['extra'] = record.extra_fields

        return json.dumps(log_data, default=str)


class ContextFilter(logging.Filter):
    """Adds the current request ID to every record (`-` outside requests)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get() or '-'
        return True


class RollingFileHandler(logging.Handler):
    """
    Logging handler that appends formatted records to a RollingFileLogger.

    Unlike the stdlib file handlers, write failures are not routed to
    handleError: a lost audit entry raises in the caller.
    """

    def __init__(self, rolling_logger: RollingFileLogger, level: int = logging.NOTSET):
        super().__init__(level)
        self.rolling_logger = rolling_logger
        self.setFormatter(CategoryFormatter())

    def emit(self, record: logging.LogRecord) -> None:
        self.rolling_logger.append(self.format(record))


class StructuredLogger:
    """
    Wrapper for Python logger with structured logging support.

    Keyword arguments other than `exc_info` are attached to the record as
    `extra_fields` (rendered by JSONFormatter).
    """

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    @property
    def name(self) -> str:
        return self._logger.name

    def _log_with_context(
        self,
        level: int,
        message: str,
        exc_info: Any = None,
        **kwargs: Any
    ) -> None:
        extra = {'extra_fields': kwargs} if kwargs else {}
        self._logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log_with_context(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log_with_context(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log_with_context(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log_with_context(logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        self._log_with_context(logging.CRITICAL, message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log error with the active exception's traceback."""
        self._log_with_context(logging.ERROR, message, exc_info=True, **kwargs)


def configure_logging(
    level: str = "INFO",
    format_type: str = "text",
    log_dir: Optional[Path] = None,
    base_name: str = "server",
    retention_count: int = 10,
    enable_console: bool = True,
    module_levels: Optional[Dict[str, str]] = None,
    rolling_logger: Optional[RollingFileLogger] = None
) -> Optional[RollingFileLogger]:
    """
    Configure logging for the application.

    Replaces all handlers on the root logger.

    Args:
        level: Default log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Console output format ("json" or "text")
        log_dir: Existing directory for rolling log files (no file output if None)
        base_name: Rolling log file prefix
        retention_count: Number of daily files to keep
        enable_console: Enable console (stdout) logging
        module_levels: Per-module log levels (e.g. {"httpx": "WARNING"})
        rolling_logger: Pre-built rolling logger, takes precedence over log_dir

    Returns:
        The RollingFileLogger receiving file output, or None
    """
    log_level = resolve_level(level)

    handlers = []

    if enable_console:
        if format_type == "json":
            formatter = JSONFormatter()
        else:
            formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)-30s | [%(request_id)s] | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(ContextFilter())
        handlers.append(console_handler)

    if rolling_logger is None and log_dir is not None:
        rolling_logger = RollingFileLogger(
            log_dir,
            base_name=base_name,
            retention_count=retention_count
        )

    if rolling_logger is not None:
        handlers.append(RollingFileHandler(rolling_logger))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    for handler in handlers:
        root_logger.addHandler(handler)

    if module_levels:
        for module_name, module_level in module_levels.items():
            logging.getLogger(module_name).setLevel(resolve_level(module_level))

    # Silence noisy libraries
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)

    return rolling_logger


def get_logger(name: str) -> StructuredLogger:
    """
    Get structured logger for module.

    Args:
        name: Logger name (usually __name__)
    """
    return StructuredLogger(name)


def set_request_context(request_id: Optional[str] = None) -> None:
    """Set the request ID for the current context."""
    if request_id:
        request_id_ctx.set(request_id)


def clear_request_context() -> None:
    """Clear the request ID."""
    request_id_ctx.set(None)


def get_request_id() -> Optional[str]:
    """Get current request ID from context."""
    return request_id_ctx.get()


# Default configuration presets
LOGGING_PRESETS = {
    'development': {
        'level': 'DEBUG',
        'format_type': 'text',
        'enable_console': True,
        'module_levels': {
            'uvicorn.access': 'WARNING',
        }
    },
    'production': {
        'level': 'INFO',
        'format_type': 'json',
        'enable_console': True,
        'module_levels': {
            'uvicorn.access': 'WARNING',
        }
    },
    'testing': {
        'level': 'INFO',
        'format_type': 'text',
        'enable_console': False,
        'module_levels': {}
    }
}


def configure_from_preset(preset: str = 'development', **overrides: Any) -> Optional[RollingFileLogger]:
    """
    Configure logging from preset.

    Args:
        preset: Preset name ('development', 'production', or 'testing')
        **overrides: Override preset values (e.g. log_dir, level)

    Returns:
        The RollingFileLogger receiving file output, or None
    """
    if preset not in LOGGING_PRESETS:
        raise ValueError(f"Unknown preset: {preset}. Available: {list(LOGGING_PRESETS.keys())}")

    config = LOGGING_PRESETS[preset].copy()
    config.update(overrides)

    return configure_logging(**config)
