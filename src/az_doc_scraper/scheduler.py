import asyncio
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")

DEFAULT_FETCH_LIMIT = 2
DEFAULT_SUBTREE_LIMIT = 1


class BoundedPool:
    """Runs coroutines with at most ``size`` of them in flight.

    Callers past the bound wait for a free slot in arrival order; nothing is
    dropped.
    """

    def __init__(self, size: int):
        if size < 1:
            raise ValueError(f"Pool size must be at least 1, got {size}")
        self.size = size
        self.active = 0
        self._semaphore = asyncio.Semaphore(size)

    async def run(self, func: Callable[..., Awaitable[T]], *args, **kwargs) -> T:
        async with self._semaphore:
            self.active += 1
            try:
                return await func(*args, **kwargs)
            finally:
                self.active -= 1


class ConcurrencyScheduler:
    """The two pools used by a crawl.

    ``fetch_pool`` bounds the group-page fetches of one base command,
    ``subtree_pool`` bounds how many base commands are built at once.
    """

    def __init__(self, fetch_limit: int = DEFAULT_FETCH_LIMIT, subtree_limit: int = DEFAULT_SUBTREE_LIMIT):
        self.fetch_pool = BoundedPool(fetch_limit)
        self.subtree_pool = BoundedPool(subtree_limit)
