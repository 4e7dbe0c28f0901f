"""Core data models for Newsdesk."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

# Raw upstream date representation: a datetime, epoch seconds/milliseconds,
# a free-form string, or a ``{"date": ..., "timezone": ...}`` record.
DateValue = datetime | int | float | str | Mapping[str, Any] | None


@dataclass(frozen=True)
class Article:
    """A normalized news article produced by a source adapter.

    The four date fields are carried as received; the authoritative instant
    is derived from them by ``newsdesk.dates.resolve_publish_date``.
    """

    id: int
    title: str
    slug: str
    link: str
    source: str
    intro: str = ""
    summary: str | None = None
    label: str = ""
    tslug: str = ""
    tid: int = 0
    seo_alt: str = ""
    image: str = ""
    start_publish: DateValue = None
    date: DateValue = None
    created: DateValue = None
    updated: DateValue = None
    category: str | None = None
    link2: str = ""
    first_item: bool = False


@dataclass(frozen=True)
class ArticleDetailResult:
    """Outcome of resolving a single article by slug or id.

    ``attempted_urls`` lists every detail URL requested, in dispatch order,
    whether or not it succeeded.
    """

    article: Article | None
    attempted_urls: tuple[str, ...] = ()


@dataclass(frozen=True)
class SourceInfo:
    """Read-only catalog entry describing a configured source."""

    id: str
    name: str
    type: str
    first_page_only: bool = False
    max_age_days: int | None = None
    enabled_by_default: bool = True
