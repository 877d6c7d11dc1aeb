"""
Per-player cache of extracted fragments with single-flight extraction.

Many formats (and many concurrent batches) point at the same player script.
The first lookup for a key starts one extraction task; everyone else asking
for that key meanwhile awaits the same task. Results live for the process
lifetime, failures are never stored.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .base import FragmentPair

log = logging.getLogger("playersig.cache")

ExtractFn = Callable[[], Awaitable[FragmentPair]]


def _retrieve_exception(task: asyncio.Task):
    # every waiter may have been cancelled; mark the failure as seen anyway
    if not task.cancelled():
        task.exception()


class FragmentCache:
    def __init__(self):
        self._entries: dict[str, FragmentPair] = {}
        self._inflight: dict[str, asyncio.Task] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[FragmentPair]:
        return self._entries.get(key)

    def set(self, key: str, value: FragmentPair):
        self._entries[key] = value

    def invalidate(self, key: str) -> bool:
        """Drop a stored entry. In-flight work for the key is left alone."""
        return self._entries.pop(key, None) is not None

    def clear(self):
        self._entries.clear()

    async def get_or_extract(self, key: str, extract_fn: ExtractFn) -> FragmentPair:
        cached = self._entries.get(key)
        if cached is not None:
            log.debug("cache hit: %s", key)
            return cached

        task = self._inflight.get(key)
        if task is None:
            log.info("extracting functions for %s", key)
            task = asyncio.ensure_future(self._extract(key, extract_fn))
            task.add_done_callback(_retrieve_exception)
            self._inflight[key] = task
        else:
            log.debug("joining in-flight extraction: %s", key)

        # shield: a cancelled caller must not cancel everyone else's result
        return await asyncio.shield(task)

    async def _extract(self, key: str, extract_fn: ExtractFn) -> FragmentPair:
        try:
            result = await extract_fn()
        except Exception as e:
            log.warning("extraction failed for %s: %s", key, e)
            raise
        else:
            self._entries[key] = result
            return result
        finally:
            self._inflight.pop(key, None)


# Process-wide default, shared by get_functions() unless one is passed in.
cache = FragmentCache()
