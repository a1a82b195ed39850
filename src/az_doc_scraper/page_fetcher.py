import asyncio
import logging
from time import perf_counter
from typing import Optional

import aiohttp

from .errors import FetchFailure

logger = logging.getLogger(__name__)


class PageFetcher:
    """Fetches raw page markup over HTTP.

    Any non-200 response or transport error raises FetchFailure. With
    ``max_retries`` above zero, failures are retried with exponential backoff
    before giving up.
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: int = 90,
        max_retries: int = 0,
        backoff: float = 1.0,
    ):
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff = backoff
        self.total_fetch_time = 0.0
        self.total_fetches = 0
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "PageFetcher":
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def _get(self, url: str) -> str:
        if self._session is None:
            raise RuntimeError("PageFetcher used outside of 'async with'")
        try:
            async with self._session.get(url) as response:
                if response.status != 200:
                    raise FetchFailure(url, status=response.status)
                return await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchFailure(url, reason=str(e) or type(e).__name__) from e

    async def fetch(self, url: str, retries: int = 0) -> str:
        """Fetch a page and return its markup."""
        start_time = perf_counter()
        try:
            content = await self._get(url)
        except FetchFailure as e:
            if retries < self.max_retries:
                delay = self.backoff * (2 ** retries)
                logger.warning(f"{e} (attempt {retries + 1}), retrying in {delay:.1f}s")
                await asyncio.sleep(delay)
                return await self.fetch(url, retries + 1)
            logger.error(str(e))
            raise

        duration = perf_counter() - start_time
        self.total_fetch_time += duration
        self.total_fetches += 1
        avg_time = self.total_fetch_time / self.total_fetches
        logger.debug(f"Fetched {url} - Took {duration:.2f}s (Avg: {avg_time:.2f}s)")
        return content
