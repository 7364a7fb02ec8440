import functools
import inspect
import logging
import time

logger = logging.getLogger(__name__)


class Profiler:
    """
    Decorator for timing synchronous and asynchronous callables. Elapsed
    wall-clock time is logged at debug level, including when the call raises.
    """

    @staticmethod
    def profile(func):
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                start = time.perf_counter()
                try:
                    return await func(*args, **kwargs)
                finally:
                    Profiler._report(func, start)

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                Profiler._report(func, start)

        return sync_wrapper

    @staticmethod
    def _report(func, start: float):
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(f"[Profiler] {func.__qualname__} took {elapsed_ms:.1f}ms")
