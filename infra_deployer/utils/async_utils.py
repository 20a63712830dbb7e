# infra_deployer/utils/async_utils.py
"""Bridges between the async deploy engine and blocking callers or SDKs"""

import asyncio
import functools
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Awaitable, Callable, Coroutine, TypeVar

T = TypeVar('T')

SleepFunc = Callable[[float], Awaitable[None]]


def _in_running_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run a coroutine to completion from synchronous code (CLI commands)

    When an event loop is already running in this thread, the coroutine gets
    its own loop in a worker thread instead.
    """
    if not _in_running_loop():
        return asyncio.run(coro)

    with ThreadPoolExecutor(max_workers=1) as executor:
        return executor.submit(asyncio.run, coro).result()


async def run_blocking(func: Callable[..., T], *args, **kwargs) -> T:
    """
    Run a blocking call (e.g. a boto3 request) in the default executor

    Args:
        func: Blocking callable
        *args: Positional arguments
        **kwargs: Keyword arguments

    Returns:
        Call result
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))
