"""Paginated JSON API source adapter."""

import logging
import re
from collections.abc import Mapping
from typing import Any

import httpx

from newsdesk.config.models import ApiSourceConfig
from newsdesk.data import Article
from newsdesk.policy import apply_max_age, is_source_active
from newsdesk.sources.base import Clock, SourceResult, dedupe_by_id, utc_now
from newsdesk.text import (
    fill_endpoint_template,
    hash_string,
    normalize_image_url,
    slugify,
    text_content,
)

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"[0-9]+")


def _coerce_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _DIGITS_RE.fullmatch(value.strip()):
        return int(value.strip())
    return None


def map_api_item(item: Any, source: ApiSourceConfig) -> Article | None:
    """Map one raw API item to an Article.

    Upstream keys are camelCase (``startPublish``, ``seoAlt``, ``link2``).
    Items without a title or a link are rejected.

    Args:
        item: Raw JSON object from the ``items`` array or a detail response.
        source: The source the item belongs to.

    Returns:
        The Article, or None if the item is unusable.
    """
    if not isinstance(item, Mapping):
        return None

    title = text_content(item.get("title")).strip()
    link = text_content(item.get("link")).strip() or text_content(item.get("link2")).strip()
    if not title or not link:
        return None

    upstream_id = _coerce_int(item.get("id"))
    article_id = upstream_id if upstream_id is not None else hash_string(link)

    slug = text_content(item.get("slug")).strip()
    if not slug:
        title_slug = slugify(title)
        slug = f"{source.id}-{title_slug}" if title_slug else f"{source.id}-{article_id}"

    label = text_content(item.get("label")).strip() or source.name
    image = text_content(item.get("image"))
    if source.image_base_url:
        image = normalize_image_url(image, source.image_base_url)

    summary = item.get("summary")
    category = text_content(item.get("category")).strip()

    return Article(
        id=article_id,
        title=title,
        slug=slug,
        link=link,
        source=source.id,
        intro=text_content(item.get("intro")),
        summary=summary if isinstance(summary, str) else None,
        label=label,
        tslug=text_content(item.get("tslug")).strip() or slugify(label) or source.id,
        tid=_coerce_int(item.get("tid")) or 0,
        seo_alt=text_content(item.get("seoAlt")) or title,
        image=image,
        start_publish=item.get("startPublish"),
        date=item.get("date"),
        created=item.get("created"),
        updated=item.get("updated"),
        category=category or None,
        link2=text_content(item.get("link2")).strip() or link,
        first_item=False,
    )


class ApiSourceAdapter:
    """Fetch one page of a templated JSON API and normalize its items.

    Args:
        source: API source configuration.
        clock: Returns the current time, used by the freshness policy.
    """

    def __init__(self, source: ApiSourceConfig, *, clock: Clock = utc_now) -> None:
        self._source = source
        self._clock = clock

    @property
    def source(self) -> ApiSourceConfig:
        return self._source

    def build_url(self, page: int) -> str:
        """Substitute page, page size and extra params into the endpoint."""
        values: dict[str, Any] = {
            "page": page,
            "perPage": self._source.per_page,
            **self._source.params,
        }
        return fill_endpoint_template(self._source.endpoint, values)

    async def fetch(self, client: httpx.AsyncClient, page: int) -> SourceResult:
        if not is_source_active(self._source, page):
            return SourceResult(source_id=self._source.id, url=None)

        url = self.build_url(page)
        try:
            response = await client.get(url)
            response.raise_for_status()
            items = _extract_items(response.json())

            articles: list[Article] = []
            for item in items:
                try:
                    article = map_api_item(item, self._source)
                except Exception as e:
                    logger.debug(f"Dropped unmappable item from {self._source.id}: {e}")
                    continue
                if article is None:
                    logger.debug(f"Dropped item without title or link from {self._source.id}")
                    continue
                articles.append(article)
            articles = apply_max_age(dedupe_by_id(articles), self._source, self._clock())
        except Exception as e:
            logger.warning(f"Source {self._source.id} failed ({url}): {e}")
            return SourceResult(source_id=self._source.id, url=url, error=str(e))

        return SourceResult(source_id=self._source.id, url=url, articles=articles)


def _extract_items(data: Any) -> list[Any]:
    """Return the ``items`` array of an API response body."""
    if not isinstance(data, Mapping):
        msg = f"Expected a JSON object, got {type(data).__name__}"
        raise ValueError(msg)
    items = data.get("items")
    if items is None:
        return []
    if not isinstance(items, list):
        msg = f"Expected 'items' to be a list, got {type(items).__name__}"
        raise ValueError(msg)
    return items
