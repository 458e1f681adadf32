# ABOUTME: Logger utilities with context binding and operation tracking decorators
# ABOUTME: Provides get_logger plus page/table context managers for structured extraction logs

import functools
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

import structlog

F = TypeVar("F", bound=Callable[..., Any])


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance with automatic module detection.

    Args:
        name: Logger name, auto-detected from caller if None

    Returns:
        Configured structlog logger instance
    """
    if name is None:
        import inspect

        frame = inspect.currentframe()
        if frame and frame.f_back:
            name = frame.f_back.f_globals.get("__name__", "unknown")

    return structlog.get_logger(name or "appledata")


def generate_operation_id() -> str:
    """Generate a unique operation ID for tracking a sync run."""
    return str(uuid.uuid4())[:8]


def _result_info(result: Any) -> dict[str, Any]:
    if isinstance(result, (list, tuple)):
        return {"result_count": len(result)}
    records = getattr(result, "records", None)
    if isinstance(records, list):
        return {"result_count": len(records), "failure_count": len(getattr(result, "failures", []))}
    return {}


def with_operation_context(operation: str, **context) -> Callable[[F], F]:
    """Decorator to log start, completion and failure of a synchronous operation.

    Args:
        operation: Operation name for logging
        **context: Additional context to bind to logger
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(func.__module__).bind(
                operation=operation, operation_id=generate_operation_id(), function=func.__name__, **context
            )

            logger.debug(f"Starting {operation}")
            start_time = time.time()

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Failed {operation}",
                    duration_seconds=round(time.time() - start_time, 3),
                    error=str(e),
                    error_type=type(e).__name__,
                    success=False,
                )
                raise

            logger.info(
                f"Completed {operation}",
                duration_seconds=round(time.time() - start_time, 3),
                success=True,
                **_result_info(result),
            )
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


def with_async_operation_context(operation: str, **context) -> Callable[[F], F]:
    """Async variant of with_operation_context."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            logger = get_logger(func.__module__).bind(
                operation=operation, operation_id=generate_operation_id(), function=func.__name__, **context
            )

            logger.info(f"Starting {operation}")
            start_time = time.time()

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Failed {operation}",
                    duration_seconds=round(time.time() - start_time, 3),
                    error=str(e),
                    error_type=type(e).__name__,
                    success=False,
                )
                raise

            logger.info(
                f"Completed {operation}",
                duration_seconds=round(time.time() - start_time, 3),
                success=True,
                **_result_info(result),
            )
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


class LogContext:
    """Context manager for binding logger context."""

    def __init__(self, logger: structlog.stdlib.BoundLogger, **context):
        self.logger = logger
        self.context = context
        self.bound_logger = None

    def __enter__(self) -> structlog.stdlib.BoundLogger:
        self.bound_logger = self.logger.bind(**self.context)
        return self.bound_logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None and self.bound_logger is not None:
            self.bound_logger.error("Context operation failed", error=str(exc_val), error_type=exc_type.__name__)


def with_page_context(url: str, **context) -> LogContext:
    """Create a logging context for work on a single fetched page."""
    return LogContext(get_logger(), url=url, **context)


def with_sync_context(**context) -> LogContext:
    """Create a logging context for a full sync run."""
    return LogContext(get_logger(), pipeline="sync", operation_id=generate_operation_id(), **context)
