"""Wall-clock timing for the resize/export algorithms and worker jobs."""

import inspect
import time
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import ParamSpec, TypeVar, cast

from loguru import logger

P = ParamSpec("P")
R = TypeVar("R")


@contextmanager
def stopwatch(label: str) -> Iterator[None]:
    """
    Log ``label`` and the block's elapsed time at INFO, also when it raises.

    The record's extra dict holds ``elapsed`` (seconds) next to any context
    the caller bound with ``logger.contextualize``; ComputeModule.execute
    binds ``job_id`` and ``task_type``, so algorithm timings inside a job can
    be attributed to it.
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        logger.bind(elapsed=elapsed).info(f"[PROFILE] {label} took {elapsed:.3f}s")


def timed(func: Callable[P, R]) -> Callable[P, R]:
    """Time every call of ``func`` (sync or async) under its qualified name.

    Usage:
        @timed
        def fit_crop(image, width, height):
            ...
    """
    label = func.__qualname__

    if inspect.iscoroutinefunction(func):
        coro_func = cast(Callable[P, Awaitable[object]], func)

        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> object:
            with stopwatch(label):
                return await coro_func(*args, **kwargs)

        return cast(Callable[P, R], async_wrapper)

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        with stopwatch(label):
            return func(*args, **kwargs)

    return wrapper
