"""Per-source pagination and freshness rules."""

from datetime import datetime, timedelta

from newsdesk.config.models import ApiSourceConfig, RssSourceConfig
from newsdesk.data import Article
from newsdesk.dates import article_timestamp


def is_source_active(source: ApiSourceConfig | RssSourceConfig, page: int) -> bool:
    """First-page-only sources contribute to page 1 and nothing else."""
    return not (source.first_page_only and page > 1)


def apply_max_age(
    articles: list[Article],
    source: ApiSourceConfig | RssSourceConfig,
    now: datetime,
) -> list[Article]:
    """Drop articles older than the source's ``max_age_days``.

    Articles with no resolvable date count as epoch 0 and are therefore
    dropped whenever a max age is configured.
    """
    if not source.max_age_days:
        return articles
    cutoff = (now - timedelta(days=source.max_age_days)).timestamp() * 1000
    return [a for a in articles if article_timestamp(a) >= cutoff]
