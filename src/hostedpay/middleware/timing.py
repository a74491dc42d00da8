from __future__ import annotations

import functools
import inspect
import logging
import time
from typing import Optional

logger = logging.getLogger(__name__)


def log_timing(tag: Optional[str] = None):
    """Log how long the wrapped function (sync or async) took, at DEBUG."""

    def decorator(func):
        name = tag or func.__name__

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                t0 = time.perf_counter()
                try:
                    return await func(*args, **kwargs)
                finally:
                    dt_ms = (time.perf_counter() - t0) * 1000.0
                    logger.debug("[TIME][%s] %.3fms", name, dt_ms)

            return async_wrapper
        else:

            @functools.wraps(func)
            def sync_wrapper(*args, **kwargs):
                t0 = time.perf_counter()
                try:
                    return func(*args, **kwargs)
                finally:
                    dt_ms = (time.perf_counter() - t0) * 1000.0
                    logger.debug("[TIME][%s] %.3fms", name, dt_ms)

            return sync_wrapper

    return decorator
