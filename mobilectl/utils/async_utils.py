# mobilectl/utils/async_utils.py

"""Asynchronous operation utilities"""

import asyncio
import threading
from typing import Any, Awaitable, Coroutine, List, Optional, TypeVar, Union

T = TypeVar('T')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run a coroutine from synchronous code

    CLI commands call this once per invocation. When a loop is already
    running (for example inside a notebook), the coroutine runs on a fresh
    loop in a helper thread.

    Args:
        coro: Coroutine to run

    Returns:
        Coroutine result
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    outcome = {}

    def run_in_thread():
        try:
            outcome['result'] = asyncio.run(coro)
        except BaseException as e:
            outcome['error'] = e

    thread = threading.Thread(target=run_in_thread)
    thread.start()
    thread.join()

    if 'error' in outcome:
        raise outcome['error']
    return outcome['result']


async def gather_isolated(*aws: Awaitable[Any]) -> List[Union[Any, BaseException]]:
    """
    Await every awaitable without letting one failure cancel the others

    Args:
        *aws: Awaitables to run concurrently

    Returns:
        Results in input order; a failed unit yields its exception
    """
    if not aws:
        return []
    return list(await asyncio.gather(*aws, return_exceptions=True))


async def with_timeout(aw: Awaitable[T], timeout: Optional[float]) -> T:
    """
    Await with an optional timeout

    Raises:
        asyncio.TimeoutError: If the timeout elapses
    """
    if timeout is None:
        return await aw
    return await asyncio.wait_for(aw, timeout=timeout)
