"""Timing decorators for uploads and request workflows."""
import functools
import logging
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, TypeVar, cast

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


@contextmanager
def _timed(name: str, level: int) -> Iterator[None]:
    started = time.perf_counter()
    try:
        yield
    except Exception as e:
        logger.error(f"{name} failed after {time.perf_counter() - started:.2f}s: {e}")
        raise
    logger.log(level, f"{name} completed in {time.perf_counter() - started:.2f}s")


def log_execution_time(func: F) -> F:
    """Log how long a blocking call took, at DEBUG (one line per upload)."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with _timed(func.__qualname__, logging.DEBUG):
            return func(*args, **kwargs)
    return cast(F, wrapper)


def async_log_execution_time(func: F) -> F:
    """Log how long a coroutine took, at INFO.

    Args:
        func: The coroutine function to decorate

    Returns:
        Decorated coroutine function
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        with _timed(func.__qualname__, logging.INFO):
            return await func(*args, **kwargs)
    return cast(F, wrapper)
