"""Decorators for timing and tracing blocking calls."""

import functools
import time
import logging
from typing import Callable, TypeVar, ParamSpec

P = ParamSpec("P")
R = TypeVar("R")

logger = logging.getLogger(__name__)


def timed(func: Callable[P, R]) -> Callable[P, R]:
    """Log how long a blocking call took."""
    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start
            logger.info(f"{func.__qualname__} finished in {elapsed:.2f}s")
    return wrapper


def logged(func: Callable[P, R]) -> Callable[P, R]:
    """Trace entry, and log failures before re-raising."""
    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        logger.debug(f"{func.__qualname__} called")
        try:
            return func(*args, **kwargs)
        except Exception as e:
            logger.error(f"{func.__qualname__} failed: {e}")
            raise
    return wrapper
