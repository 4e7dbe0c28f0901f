"""Source adapter protocol and shared helpers."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

import httpx

from newsdesk.config.models import ApiSourceConfig, RssSourceConfig
from newsdesk.data import Article

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class SourceResult:
    """Articles produced by one source for one page.

    ``error`` is set when the fetch failed; ``articles`` is then empty.
    ``url`` is ``None`` when no request was made.
    """

    source_id: str
    url: str | None
    articles: list[Article] = field(default_factory=list)
    error: str | None = None


class SourceAdapter(Protocol):
    """Interface for translating one upstream source into Articles."""

    @property
    def source(self) -> ApiSourceConfig | RssSourceConfig:
        """Configuration of the source this adapter reads."""
        ...

    async def fetch(self, client: httpx.AsyncClient, page: int) -> SourceResult:
        """Fetch and normalize one page of articles.

        Implementations never raise: transport errors, non-2xx responses and
        malformed payloads produce a result with ``error`` set and no
        articles.

        Args:
            client: Shared HTTP client for this aggregation run.
            page: 1-based page number.

        Returns:
            The normalized, freshness-filtered articles of this source.
        """
        ...


def dedupe_by_id(articles: list[Article]) -> list[Article]:
    """Keep the first article for each id, preserving order."""
    seen: set[int] = set()
    unique: list[Article] = []
    for article in articles:
        if article.id not in seen:
            seen.add(article.id)
            unique.append(article)
    return unique
