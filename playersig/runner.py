"""
Batch engine: extract the player's functions once, then resolve every format.

Usage:
    async with Decipherer() as d:
        resolved = await d.decipher_formats(formats, player_url)
        for url, fmt in resolved.items():
            ...
        for failure in resolved.failures:
            ...
"""
from __future__ import annotations
import logging
from typing import Iterable, Optional, Protocol

from .applier import set_download_url
from .base import DecipheredFormats, FormatDescriptor, FormatFailure, FragmentPair
from .cache import FragmentCache, cache as default_cache
from .config import Settings
from .errors import ExtractionFailed, FormatError
from .executor import Executor, make_executor
from .extractor import extract_fragments
from .fetcher import Fetcher

log = logging.getLogger("playersig.runner")


class ScriptFetcher(Protocol):
    async def get(self, url: str, **kwargs) -> str:
        ...


async def get_functions(
    player_url: str,
    fetcher: ScriptFetcher,
    *,
    cache: Optional[FragmentCache] = None,
    **fetch_options,
) -> FragmentPair:
    """Cached decipher / n-transform fragments for `player_url`."""
    cache = default_cache if cache is None else cache

    async def _extract() -> FragmentPair:
        body = await fetcher.get(player_url, **fetch_options)
        fragments = extract_fragments(body)
        if fragments.is_empty:
            raise ExtractionFailed(player_url)
        log.info("[%s] decipher=%s n-transform=%s", player_url,
                 fragments.decipher is not None, fragments.n_transform is not None)
        return fragments

    return await cache.get_or_extract(player_url, _extract)


async def decipher_formats(
    formats: Iterable[FormatDescriptor],
    player_url: str,
    fetcher: ScriptFetcher,
    executor: Executor,
    *,
    cache: Optional[FragmentCache] = None,
    **fetch_options,
) -> DecipheredFormats:
    """Resolve every format's URL. Per-format failures are collected, not raised."""
    functions = await get_functions(player_url, fetcher, cache=cache, **fetch_options)

    resolved = DecipheredFormats()
    for format in formats:
        try:
            await set_download_url(format, functions.decipher, functions.n_transform, executor)
        except FormatError as e:
            log.warning("[itag %s] could not resolve: %s", format.get("itag", "?"), e)
            resolved.failures.append(FormatFailure(format=format, error=e))
            continue
        resolved[format["url"]] = format

    log.info("resolved %d format(s), %d failed", len(resolved), len(resolved.failures))
    return resolved


# ──────────────────────────────
#  Engine
# ──────────────────────────────
class Decipherer:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        fetcher: Optional[ScriptFetcher] = None,
        executor: Optional[Executor] = None,
        cache: Optional[FragmentCache] = None,
    ):
        self.settings = settings or Settings.from_env()
        self.fetcher = fetcher or Fetcher(
            timeout=self.settings.timeout,
            proxy=self.settings.proxy,
            user_agent=self.settings.user_agent,
        )
        self.executor = executor or make_executor(
            self.settings.executor, node=self.settings.node_path)
        self.cache = default_cache if cache is None else cache

    async def close(self):
        close = getattr(self.fetcher, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "Decipherer":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def get_functions(self, player_url: str) -> FragmentPair:
        return await get_functions(player_url, self.fetcher, cache=self.cache)

    async def decipher_formats(
        self, formats: Iterable[FormatDescriptor], player_url: str
    ) -> DecipheredFormats:
        return await decipher_formats(
            formats, player_url, self.fetcher, self.executor, cache=self.cache)
