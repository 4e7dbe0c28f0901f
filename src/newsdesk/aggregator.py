"""Fan-out aggregation of all active sources into one ordered page."""

import asyncio
import logging
import time

import httpx

from newsdesk.cache import normalize_sources_key
from newsdesk.config.models import ApiSourceConfig, RssSourceConfig
from newsdesk.data import Article
from newsdesk.dates import article_timestamp
from newsdesk.policy import is_source_active
from newsdesk.run_logger import RunLogger
from newsdesk.sources.base import SourceAdapter, SourceResult

logger = logging.getLogger(__name__)


class NewsAggregator:
    """Fetch every active source concurrently and merge by publish date.

    Flow:
    1. Select configured sources matching the filter and active for the page
    2. Fetch all of them in parallel over one HTTP client
    3. Concatenate in configuration order
    4. Stable sort by resolved timestamp, newest first

    Args:
        adapters: One adapter per configured source, in catalog order.
        timeout: Timeout in seconds for every outbound request.
        user_agent: User-Agent header for upstream requests.
        run_logger: Optional RunLogger for per-source fetch records.
    """

    def __init__(
        self,
        adapters: list[SourceAdapter],
        *,
        timeout: float = 15.0,
        user_agent: str | None = None,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._adapters = adapters
        self._timeout = timeout
        self._headers = {"User-Agent": user_agent} if user_agent else {}
        self._run_logger = run_logger

    @property
    def sources(self) -> list[ApiSourceConfig | RssSourceConfig]:
        """Configuration of every source, in catalog order."""
        return [adapter.source for adapter in self._adapters]

    async def load_articles(
        self,
        page: int,
        source_filter: set[str] | None = None,
    ) -> list[Article] | None:
        """Load one merged page.

        Args:
            page: 1-based page number.
            source_filter: Source ids to include, or None for all sources.

        Returns:
            Articles sorted newest first, or None when there is no content
            (no active source, or every source came back empty).
        """
        active = [
            adapter
            for adapter in self._adapters
            if (source_filter is None or adapter.source.id in source_filter)
            and is_source_active(adapter.source, page)
        ]
        if not active:
            logger.info(f"No active sources for page {page} (filter: {source_filter})")
            return None

        run_record = None
        if self._run_logger:
            run_record = self._run_logger.start_run(page, normalize_sources_key(source_filter))

        async with httpx.AsyncClient(
            timeout=self._timeout,
            headers=self._headers,
            follow_redirects=True,
        ) as client:
            tasks = [self._fetch_timed(adapter, client, page) for adapter in active]
            results = await asyncio.gather(*tasks, return_exceptions=True)

        combined: list[Article] = []
        for adapter, result in zip(active, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning(f"Error fetching source {adapter.source.id}: {result}")
                continue
            source_result, duration = result
            combined.extend(source_result.articles)
            if self._run_logger:
                self._run_logger.log_source(run_record, source_result, duration)

        if self._run_logger:
            self._run_logger.finish_run(run_record, len(combined))

        if not combined:
            logger.info(f"No articles from {len(active)} active source(s) for page {page}")
            return None

        # list.sort is stable, so ties keep source dispatch order.
        combined.sort(key=article_timestamp, reverse=True)
        return combined

    async def _fetch_timed(
        self,
        adapter: SourceAdapter,
        client: httpx.AsyncClient,
        page: int,
    ) -> tuple[SourceResult, float]:
        t0 = time.monotonic()
        result = await adapter.fetch(client, page)
        return (result, time.monotonic() - t0)
