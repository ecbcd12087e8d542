"""Performance Logging.

Decorator and context manager for timing batch steps and logging slow
operations.
"""

import functools
import logging
import time
from typing import Any, Callable, Optional

from src.logging_config.config import DEFAULT_LOGGING_CONFIG

logger = logging.getLogger(__name__)


def _log_duration(
    log: logging.Logger,
    operation: str,
    duration_ms: float,
    threshold_ms: float,
    exc_type: Optional[type] = None,
) -> None:
    """Emit one line per timed operation: ERROR, WARNING if slow, else DEBUG."""
    extra = {"duration_ms": round(duration_ms, 2)}
    if exc_type is not None:
        log.error(
            f"{operation} failed after {duration_ms:.1f}ms: {exc_type.__name__}",
            extra=extra,
        )
    elif duration_ms >= threshold_ms:
        log.warning(f"Slow operation: {operation} took {duration_ms:.1f}ms", extra=extra)
    else:
        log.debug(f"{operation} completed in {duration_ms:.1f}ms", extra=extra)


def log_performance(
    threshold_ms: Optional[float] = None,
    logger_name: Optional[str] = None,
) -> Callable:
    """Decorator that logs function execution time.

    Args:
        threshold_ms: Slow operation threshold in milliseconds.
                     Defaults to config.slow_threshold_ms (500ms).
        logger_name: Custom logger name. Defaults to function's module.

    Example:
        @log_performance(threshold_ms=200)
        def build(self, guests, payments, now):
            ...
    """
    if threshold_ms is None:
        threshold_ms = DEFAULT_LOGGING_CONFIG.slow_threshold_ms

    def decorator(func: Callable) -> Callable:
        _logger = logging.getLogger(logger_name or func.__module__)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                elapsed = (time.perf_counter() - start) * 1000
                _log_duration(_logger, func.__qualname__, elapsed, threshold_ms, type(exc))
                raise
            elapsed = (time.perf_counter() - start) * 1000
            _log_duration(_logger, func.__qualname__, elapsed, threshold_ms)
            return result
        return wrapper

    return decorator


class PerformanceTimer:
    """Context manager for timing code blocks.

    Example:
        with PerformanceTimer("ingest") as timer:
            guests = load_guests(records)
        print(f"Ingest took {timer.duration_ms:.1f}ms")
    """

    def __init__(self, operation_name: str, threshold_ms: Optional[float] = None):
        self.operation_name = operation_name
        if threshold_ms is None:
            threshold_ms = DEFAULT_LOGGING_CONFIG.slow_threshold_ms
        self.threshold_ms = threshold_ms
        self.start_time: float = 0
        self.duration_ms: float = 0

    def __enter__(self) -> "PerformanceTimer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.duration_ms = (time.perf_counter() - self.start_time) * 1000
        _log_duration(logger, self.operation_name, self.duration_ms, self.threshold_ms, exc_type)
