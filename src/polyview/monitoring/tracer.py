"""
Operation Tracing
Structured start/end logging around pipeline operations
"""

import functools
import time
from contextlib import contextmanager
from typing import Any, Callable, TypeVar

from ..core.logging_config import get_logger

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

SLOW_OPERATION_SECONDS = 1.0


@contextmanager
def trace_operation(operation: str, **kwargs: Any):
    """
    Context manager for tracing operations with structured logging.

    Args:
        operation: Name of the operation
        **kwargs: Additional context to log
    """
    start = time.perf_counter()
    logger.debug("operation_start", operation=operation, **kwargs)

    try:
        yield
    except Exception as e:
        duration = time.perf_counter() - start
        logger.error(
            "operation_error",
            operation=operation,
            error=str(e),
            duration_ms=duration * 1000,
            **kwargs,
        )
        raise
    else:
        duration = time.perf_counter() - start
        if duration > SLOW_OPERATION_SECONDS:
            logger.warning("operation_slow", operation=operation, duration_ms=duration * 1000, **kwargs)
        else:
            logger.debug("operation_end", operation=operation, duration_ms=duration * 1000, **kwargs)


def trace_function(func: F) -> F:
    """Decorator tracing each call of ``func``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        with trace_operation("function_call", function=func.__qualname__):
            return func(*args, **kwargs)

    return wrapper  # type: ignore
