"""RSS/Atom feed source adapter."""

import asyncio
import logging
import re
from collections.abc import Mapping
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

import feedparser
import httpx

from newsdesk.config.models import RssSourceConfig
from newsdesk.data import Article
from newsdesk.dates import parse_date_string, to_iso
from newsdesk.policy import apply_max_age, is_source_active
from newsdesk.sources.base import Clock, SourceResult, dedupe_by_id, utc_now
from newsdesk.sources.images import ImageResolver, NoOpImageResolver
from newsdesk.text import hash_string, make_intro, slugify, strip_html, text_content

logger = logging.getLogger(__name__)

_IMG_SRC_RE = re.compile(r'<img[^>]+src="([^">]+)"')


def parse_feed(content: bytes | str) -> list[Mapping[str, Any]]:
    """Parse an RSS/Atom document into its entries.

    feedparser strips namespace prefixes (``content:encoded`` becomes
    ``content``, ``media:content`` becomes ``media_content``), unwraps CDATA
    and always returns a list of entries, even for a single ``<item>``.

    Raises:
        ValueError: If the document is not a feed at all.
    """
    parsed = feedparser.parse(content)
    if parsed.bozo and not parsed.entries:
        msg = f"Malformed feed: {parsed.get('bozo_exception')}"
        raise ValueError(msg)
    return list(parsed.entries)


def _first_url(items: Any, *keys: str) -> str:
    if not isinstance(items, list) or not items:
        return ""
    first = items[0]
    if not isinstance(first, Mapping):
        return ""
    for key in keys:
        value = first.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def _entry_image(entry: Mapping[str, Any], html: str) -> str:
    image = (
        _first_url(entry.get("media_content"), "url")
        or _first_url(entry.get("media_thumbnail"), "url")
        or _first_url(entry.get("enclosures"), "href", "url")
    )
    if image:
        return image
    match = _IMG_SRC_RE.search(html)
    return match.group(1) if match else ""


def _entry_published(entry: Mapping[str, Any]) -> tuple[str, datetime | None]:
    raw = text_content(entry.get("published") or entry.get("updated")).strip()
    parsed = parse_date_string(raw) if raw else None
    if parsed is None:
        struct = entry.get("published_parsed") or entry.get("updated_parsed")
        if struct:
            try:
                parsed = datetime(*struct[:6], tzinfo=UTC)
            except (TypeError, ValueError):
                parsed = None
    return raw, parsed


def map_rss_entry(entry: Mapping[str, Any], source: RssSourceConfig) -> Article | None:
    """Map a parsed feed entry to an Article.

    Link falls back to the GUID, the dedup key (and so the id) prefers the
    GUID, and the slug falls back to the id when the title has no Latin
    characters. Entries without a link or a title are rejected.

    Args:
        entry: A feedparser entry (or any mapping with the same keys).
        source: The feed the entry came from.

    Returns:
        The Article, or None if the entry is unusable. Its image may be empty;
        the network image fallback is applied by ``RssSourceAdapter``.
    """
    guid = text_content(entry.get("id")).strip()
    link = text_content(entry.get("link")).strip() or guid
    if not link:
        return None

    title = text_content(entry.get("title")).strip()
    if not title:
        return None

    raw_description = text_content(entry.get("summary")) or text_content(entry.get("content"))
    intro = make_intro(strip_html(raw_description))

    category = text_content(entry.get("tags")).strip() or source.name
    tslug = slugify(category) or source.id

    article_id = hash_string(guid or link or title)
    title_slug = slugify(title)
    slug = f"{source.id}-{title_slug}" if title_slug else f"{source.id}-{article_id}"

    raw_published, published = _entry_published(entry)
    publish_iso = to_iso(published) if published else None

    html = text_content(entry.get("content")) or raw_description

    return Article(
        id=article_id,
        title=title,
        slug=slug,
        link=link,
        source=source.id,
        intro=intro,
        summary=raw_description or None,
        label=category,
        tslug=tslug,
        tid=hash_string(f"{source.id}-{category}"),
        seo_alt=title,
        image=_entry_image(entry, html),
        start_publish=publish_iso or raw_published or None,
        date=publish_iso,
        created=publish_iso,
        updated=publish_iso,
        category=category,
        link2=link,
        first_item=False,
    )


class RssSourceAdapter:
    """Fetch a feed, map its entries and fill in missing images.

    Args:
        source: RSS source configuration.
        image_resolver: Fallback used for entries that carry no image.
        max_image_lookups: Cap on fallback lookups per fetch.
        clock: Returns the current time, used by the freshness policy.
    """

    def __init__(
        self,
        source: RssSourceConfig,
        *,
        image_resolver: ImageResolver | None = None,
        max_image_lookups: int = 10,
        clock: Clock = utc_now,
    ) -> None:
        self._source = source
        self._image_resolver = image_resolver or NoOpImageResolver()
        self._max_image_lookups = max_image_lookups
        self._clock = clock

    @property
    def source(self) -> RssSourceConfig:
        return self._source

    async def fetch(self, client: httpx.AsyncClient, page: int) -> SourceResult:
        if not is_source_active(self._source, page):
            return SourceResult(source_id=self._source.id, url=None)

        url = self._source.endpoint
        try:
            response = await client.get(url)
            response.raise_for_status()
            entries = parse_feed(response.content)

            articles: list[Article] = []
            for entry in entries:
                try:
                    article = map_rss_entry(entry, self._source)
                except Exception as e:
                    logger.debug(f"Dropped unmappable feed entry from {self._source.id}: {e}")
                    continue
                if article is None:
                    logger.debug(f"Dropped feed entry without title or link from {self._source.id}")
                    continue
                articles.append(article)
            articles = apply_max_age(dedupe_by_id(articles), self._source, self._clock())
            articles = await self._fill_missing_images(client, articles)
        except Exception as e:
            logger.warning(f"Source {self._source.id} failed ({url}): {e}")
            return SourceResult(source_id=self._source.id, url=url, error=str(e))

        return SourceResult(source_id=self._source.id, url=url, articles=articles)

    async def _fill_missing_images(
        self, client: httpx.AsyncClient, articles: list[Article]
    ) -> list[Article]:
        """Look up images for up to ``max_image_lookups`` imageless articles."""
        if not self._source.fetch_og_images:
            return articles

        missing = [i for i, a in enumerate(articles) if not a.image][: self._max_image_lookups]
        if not missing:
            return articles

        results = await asyncio.gather(
            *(self._image_resolver.resolve(client, articles[i].link) for i in missing),
            return_exceptions=True,
        )

        enriched = list(articles)
        for i, result in zip(missing, results, strict=True):
            if isinstance(result, BaseException):
                logger.debug(f"Image lookup error for {articles[i].link}: {result}")
                continue
            if result:
                enriched[i] = replace(articles[i], image=result)
        return enriched
