"""Public entry points consumed by the rendering layer."""

from collections.abc import Iterable

from newsdesk.aggregator import NewsAggregator
from newsdesk.cache import (
    DEFAULT_REVALIDATE_SECONDS,
    PostsCache,
    normalize_sources_key,
    parse_sources_key,
)
from newsdesk.data import Article, ArticleDetailResult, SourceInfo
from newsdesk.resolver import ArticleResolver


class NewsService:
    """Cached page listing, article lookup and source catalog.

    Args:
        aggregator: Aggregator over the configured sources.
        revalidate_seconds: Cache window for merged pages.
        max_pages: Pages scanned when resolving a slug.
        batch_size: Pages fetched concurrently while resolving.
        timeout: Timeout in seconds for detail requests.
        user_agent: User-Agent header for detail requests.
    """

    def __init__(
        self,
        aggregator: NewsAggregator,
        *,
        revalidate_seconds: float = DEFAULT_REVALIDATE_SECONDS,
        max_pages: int = 8,
        batch_size: int = 2,
        timeout: float = 15.0,
        user_agent: str | None = None,
    ) -> None:
        self._aggregator = aggregator
        self._cache = PostsCache(self._load_page, revalidate_seconds=revalidate_seconds)
        self._resolver = ArticleResolver(
            aggregator.sources,
            self.fetch_posts,
            max_pages=max_pages,
            batch_size=batch_size,
            timeout=timeout,
            user_agent=user_agent,
        )

    async def fetch_posts(
        self,
        page: int = 1,
        sources: Iterable[str] | None = None,
    ) -> list[Article] | None:
        """Merged, newest-first articles for ``page``; None when there is no content.

        Args:
            page: 1-based page number.
            sources: Source ids to include (None or empty for all).
        """
        return await self._cache.get(page, normalize_sources_key(sources))

    async def fetch_article_by_slug(self, slug: str) -> ArticleDetailResult:
        """Resolve one article by slug or numeric id. Never raises."""
        return await self._resolver.resolve(slug)

    def catalog(self) -> tuple[SourceInfo, ...]:
        """Read-only description of every configured source, in order."""
        return tuple(
            SourceInfo(
                id=source.id,
                name=source.name,
                type=source.type,
                first_page_only=source.first_page_only,
                max_age_days=source.max_age_days,
                enabled_by_default=source.enabled_by_default,
            )
            for source in self._aggregator.sources
        )

    def default_source_ids(self) -> list[str]:
        """Ids of the sources enabled by default."""
        return [info.id for info in self.catalog() if info.enabled_by_default]

    def clear_cache(self) -> None:
        self._cache.clear()

    async def _load_page(self, page: int, sources_key: str) -> list[Article] | None:
        return await self._aggregator.load_articles(page, parse_sources_key(sources_key))
