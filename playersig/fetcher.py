"""
HTTP fetcher for player scripts. Wraps aiohttp with common defaults,
headers, timeout, and optional proxy support.
"""
from __future__ import annotations
import aiohttp
import asyncio
import logging
from typing import Optional
from urllib.parse import urljoin

from .errors import FetchFailed

log = logging.getLogger("playersig.fetcher")

DEFAULT_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


class Fetcher:
    def __init__(self, *, timeout: int = 12, proxy: str | None = None,
                 user_agent: str = DEFAULT_UA):
        self.timeout = aiohttp.ClientTimeout(total=timeout, connect=4)
        self.proxy = proxy
        self.user_agent = user_agent
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
            )
        return self._session

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()

    async def get(
        self,
        url: str,
        *,
        base_url: str | None = None,
        headers: dict | None = None,
        params: dict | None = None,
    ) -> str:
        """GET `url` and return the body as text. Raises FetchFailed."""
        full = urljoin(base_url, url) if base_url else url
        session = await self._get_session()
        log.debug("GET %s", full)
        try:
            async with session.get(
                full,
                headers=headers or {},
                params=params,
                proxy=self.proxy,
            ) as resp:
                if resp.status >= 400:
                    raise FetchFailed(full, resp.reason or "error status", status=resp.status)
                return await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchFailed(full, str(e) or type(e).__name__) from e
