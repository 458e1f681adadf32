# ABOUTME: Logging configuration and structured logger helpers
# ABOUTME: loguru owns the sinks, structlog provides key/value loggers for the extraction code

from .config import InterceptHandler, LoggingMode, configure_logging, detect_logging_mode, get_logging_status
from .utils import (
    LogContext,
    get_logger,
    with_async_operation_context,
    with_operation_context,
    with_page_context,
    with_sync_context,
)

__all__ = [
    # Configuration
    "InterceptHandler",
    "LoggingMode",
    "configure_logging",
    "detect_logging_mode",
    "get_logging_status",
    # Utilities
    "LogContext",
    "get_logger",
    "with_async_operation_context",
    "with_operation_context",
    "with_page_context",
    "with_sync_context",
]
