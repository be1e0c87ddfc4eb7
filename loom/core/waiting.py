"""Cooperative wait-until helper for the asyncio event loop."""

import asyncio
from typing import Callable


async def wait_for(
    predicate: Callable[[], bool],
    timeout: float,
    interval: float = 0.1,
) -> bool:
    """
    Suspend until ``predicate()`` is true or ``timeout`` seconds elapse.

    The predicate is checked immediately and then every ``interval`` seconds.
    Never raises on timeout.

    Returns:
        True if the predicate held, False if the wait timed out
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout

    while not predicate():
        remaining = deadline - loop.time()
        if remaining <= 0:
            return False
        await asyncio.sleep(min(interval, remaining))

    return True
