"""Process-wide request cache with in-flight deduplication."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Hashable, Tuple

logger = logging.getLogger(__name__)

CacheKey = Tuple[Hashable, ...]


def make_key(operation: str, *params: Any) -> CacheKey:
    """
    Build a cache key from an operation name and its parameters.

    Unordered parameters (sets, frozensets) become sorted tuples and
    lists become tuples so equal requests map to equal keys.
    """
    normalized = []
    for param in params:
        if isinstance(param, (set, frozenset)):
            param = tuple(sorted(param))
        elif isinstance(param, list):
            param = tuple(param)
        normalized.append(param)
    return (operation, *normalized)


class _Entry:
    """One keyed fetch, in flight or settled."""

    __slots__ = ("task", "retain")

    def __init__(self, task: "asyncio.Future", retain: bool):
        self.task = task
        self.retain = retain


class RequestCache:
    """
    Keyed cache that allows exactly one in-flight fetch per key.

    Concurrent callers of `get_or_fetch` for the same key share a single
    producer task and observe the same value or the same exception.
    Successful results stay until `invalidate` drops them; there is no TTL.
    Failed and cancelled fetches are never retained.
    """

    def __init__(self):
        self._entries: Dict[CacheKey, _Entry] = {}

    async def get_or_fetch(
        self,
        key: CacheKey,
        producer: Callable[[], Awaitable[Any]],
        retain: bool = True
    ) -> Any:
        """
        Return the cached value for `key`, joining or starting a fetch.

        Args:
            key: Tuple key, usually from `make_key`
            producer: Zero-argument coroutine function issuing the request
            retain: Keep the value after completion (False = dedupe in flight only)

        Returns:
            The producer's value, shared by every caller of this fetch
        """
        entry = self._entries.get(key)
        if entry is not None:
            if entry.task.done():
                logger.debug(f"Cache hit: {key}")
                return entry.task.result()
            logger.debug(f"Joining in-flight fetch: {key}")
            return await asyncio.shield(entry.task)

        logger.debug(f"Cache miss, fetching: {key}")
        task = asyncio.ensure_future(producer())
        entry = _Entry(task, retain)
        self._entries[key] = entry
        task.add_done_callback(lambda done: self._settle(key, entry, done))
        return await asyncio.shield(task)

    def _settle(self, key: CacheKey, entry: _Entry, task: "asyncio.Future") -> None:
        """Drop the entry unless it completed successfully and should be kept."""
        failed = task.cancelled() or task.exception() is not None
        if failed or not entry.retain:
            if self._entries.get(key) is entry:
                del self._entries[key]
            if failed:
                logger.debug(f"Fetch failed, not cached: {key}")

    def invalidate(self, prefix: CacheKey) -> int:
        """
        Drop every entry whose key starts with `prefix`.

        In-flight fetches keep serving the callers already awaiting them,
        but their results are not stored; the next call re-issues the request.

        Returns:
            Number of entries dropped
        """
        size = len(prefix)
        stale = [key for key in self._entries if key[:size] == prefix]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug(f"Invalidated {len(stale)} cache entries for {prefix}")
        return len(stale)

    def is_cached(self, key: CacheKey) -> bool:
        """Whether a settled value is held for `key`."""
        entry = self._entries.get(key)
        return entry is not None and entry.task.done()

    def in_flight(self, key: CacheKey) -> bool:
        """Whether a fetch for `key` is currently outstanding."""
        entry = self._entries.get(key)
        return entry is not None and not entry.task.done()

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
