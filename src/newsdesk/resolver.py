"""Lookup of a single article by slug or numeric id."""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any
from urllib.parse import unquote

import httpx

from newsdesk.config.models import ApiSourceConfig, RssSourceConfig
from newsdesk.data import Article, ArticleDetailResult
from newsdesk.sources.api import map_api_item
from newsdesk.text import fill_endpoint_template

logger = logging.getLogger(__name__)

# Detail responses wrap the article under one of these keys, or not at all.
DETAIL_ENVELOPE_KEYS = ("item", "article", "data")

_DIGITS_RE = re.compile(r"[0-9]+")

PageFetcher = Callable[[int], Awaitable[list[Article] | None]]


def _unwrap_detail(data: Any) -> Mapping[str, Any] | None:
    if not isinstance(data, Mapping):
        return None
    for key in DETAIL_ENVELOPE_KEYS:
        value = data.get(key)
        if isinstance(value, Mapping):
            return value
    return data


def matches_article(candidate: Article, decoded: str, raw: str) -> bool:
    """Whether ``candidate`` is the article a slug or id refers to."""
    candidate_id = str(candidate.id)
    return (
        candidate.slug == decoded
        or candidate.tslug == decoded
        or candidate_id == decoded
        or candidate_id == raw
    )


class ArticleResolver:
    """Resolve a slug or id via direct detail lookup, then a paginated scan.

    Numeric inputs are first looked up on the detail endpoint of every API
    source that has one, in each configured language. Otherwise (or on a
    miss) pages ``1..max_pages`` are scanned ``batch_size`` pages at a time.

    Args:
        sources: Source catalog; API sources with a ``detail_endpoint`` are
            used for direct lookups.
        fetch_page: Returns the merged article list for a page (or None).
        max_pages: Last page scanned.
        batch_size: Pages fetched concurrently per batch.
        timeout: Timeout in seconds for detail requests.
        user_agent: User-Agent header for detail requests.
    """

    def __init__(
        self,
        sources: Sequence[ApiSourceConfig | RssSourceConfig],
        fetch_page: PageFetcher,
        *,
        max_pages: int = 8,
        batch_size: int = 2,
        timeout: float = 15.0,
        user_agent: str | None = None,
    ) -> None:
        if batch_size < 2:
            raise ValueError(f"batch_size must be at least 2, got {batch_size}")
        self._detail_sources = [
            s for s in sources if isinstance(s, ApiSourceConfig) and s.detail_endpoint
        ]
        self._fetch_page = fetch_page
        self._max_pages = max_pages
        self._batch_size = batch_size
        self._timeout = timeout
        self._headers = {"User-Agent": user_agent} if user_agent else {}

    async def resolve(self, slug: str) -> ArticleDetailResult:
        """Find the article for ``slug``.

        Args:
            slug: Article slug (possibly percent-encoded) or numeric id.

        Returns:
            The article (or None) with every detail URL attempted.
        """
        attempted_urls: list[str] = []

        if _DIGITS_RE.fullmatch(slug):
            article = await self._lookup_detail(slug, attempted_urls)
            if article is not None:
                return ArticleDetailResult(article=article, attempted_urls=tuple(attempted_urls))

        try:
            article = await self._scan_pages(slug)
        except Exception as e:
            logger.warning(f"Page scan failed for {slug!r}: {e}")
            article = None

        if article is None:
            logger.info(f"Article {slug!r} not found within {self._max_pages} pages")
        return ArticleDetailResult(article=article, attempted_urls=tuple(attempted_urls))

    async def _lookup_detail(self, article_id: str, attempted_urls: list[str]) -> Article | None:
        """Query every detail endpoint/language concurrently; first hit wins."""
        targets: list[tuple[ApiSourceConfig, str]] = []
        for source in self._detail_sources:
            for lang in source.detail_langs:
                url = fill_endpoint_template(
                    source.detail_endpoint or "", {"lang": lang, "id": article_id}
                )
                attempted_urls.append(url)
                targets.append((source, url))

        if not targets:
            return None

        async with httpx.AsyncClient(
            timeout=self._timeout,
            headers=self._headers,
            follow_redirects=True,
        ) as client:
            results = await asyncio.gather(
                *(self._fetch_detail(client, source, url) for source, url in targets)
            )

        return next((article for article in results if article is not None), None)

    async def _fetch_detail(
        self,
        client: httpx.AsyncClient,
        source: ApiSourceConfig,
        url: str,
    ) -> Article | None:
        try:
            response = await client.get(url)
            response.raise_for_status()
            payload = _unwrap_detail(response.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.debug(f"Detail lookup failed ({url}): {e}")
            return None
        if payload is None:
            return None
        return map_api_item(payload, source)

    async def _scan_pages(self, raw_slug: str) -> Article | None:
        decoded = unquote(raw_slug)
        pages = list(range(1, self._max_pages + 1))

        for start in range(0, len(pages), self._batch_size):
            batch = pages[start : start + self._batch_size]
            batch_results = await asyncio.gather(*(self._fetch_page(p) for p in batch))
            for posts in batch_results:
                if not posts:
                    continue
                for candidate in posts:
                    if matches_article(candidate, decoded, raw_slug):
                        return candidate
        return None
