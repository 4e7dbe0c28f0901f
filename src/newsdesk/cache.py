"""Time-bucketed memoization of merged pages.

Entries are keyed by ``(page, sources_key)`` and served unchanged until the
revalidation window has elapsed; the next request after that recomputes.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable

from newsdesk.data import Article

logger = logging.getLogger(__name__)

ALL_SOURCES_KEY = "__all__"
DEFAULT_REVALIDATE_SECONDS = 60.0

PageLoader = Callable[[int, str], Awaitable[list[Article] | None]]


def normalize_sources_key(sources: Iterable[str] | None) -> str:
    """Canonical cache key for a source selection.

    Ids are trimmed, deduplicated and sorted. No selection (or only blank
    ids) maps to ``ALL_SOURCES_KEY``.
    """
    if not sources:
        return ALL_SOURCES_KEY
    unique_ids = sorted({source_id.strip() for source_id in sources if source_id.strip()})
    if not unique_ids:
        return ALL_SOURCES_KEY
    return ",".join(unique_ids)


def parse_sources_key(sources_key: str) -> set[str] | None:
    """Inverse of ``normalize_sources_key``; None means every source."""
    if sources_key == ALL_SOURCES_KEY:
        return None
    return {source_id.strip() for source_id in sources_key.split(",") if source_id.strip()}


class PostsCache:
    """Memoize a page loader for a fixed revalidation window.

    At most one computation runs per key at a time: concurrent callers for
    the same key wait on a per-key lock and then read the fresh entry.
    ``None`` results are cached like any other value. A key's lock lives only
    while some caller holds or awaits it, and storing an entry evicts every
    entry older than the window, so memory is bounded by recently used keys.

    Args:
        loader: Coroutine function computing a page for ``(page, sources_key)``.
        revalidate_seconds: Age after which an entry is recomputed.
        clock: Monotonic clock in seconds.
    """

    def __init__(
        self,
        loader: PageLoader,
        *,
        revalidate_seconds: float = DEFAULT_REVALIDATE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self._revalidate_seconds = revalidate_seconds
        self._clock = clock
        self._entries: dict[tuple[int, str], tuple[float, list[Article] | None]] = {}
        self._locks: dict[tuple[int, str], asyncio.Lock] = {}
        self._lock_users: dict[tuple[int, str], int] = {}

    def _fresh(self, key: tuple[int, str]) -> tuple[bool, list[Article] | None]:
        entry = self._entries.get(key)
        if entry is None:
            return (False, None)
        stored_at, value = entry
        if self._clock() - stored_at >= self._revalidate_seconds:
            return (False, None)
        return (True, value)

    async def get(self, page: int, sources_key: str) -> list[Article] | None:
        """Return the cached page, recomputing it when stale or missing."""
        key = (page, sources_key)
        hit, value = self._fresh(key)
        if hit:
            logger.debug(f"Cache hit for page {page} [{sources_key}]")
            return value

        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                hit, value = self._fresh(key)
                if hit:
                    return value
                logger.debug(f"Cache miss for page {page} [{sources_key}]")
                value = await self._loader(page, sources_key)
                now = self._clock()
                self._evict_stale(now)
                self._entries[key] = (now, value)
                return value
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._locks[key]

    def _evict_stale(self, now: float) -> None:
        stale = [
            key
            for key, (stored_at, _) in self._entries.items()
            if now - stored_at >= self._revalidate_seconds
        ]
        for key in stale:
            del self._entries[key]

    def clear(self) -> None:
        """Drop every cached entry."""
        self._entries.clear()
