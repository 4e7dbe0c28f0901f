"""Tests for ArticleResolver."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from conftest import make_article

from newsdesk.config.models import ApiSourceConfig, RssSourceConfig
from newsdesk.data import Article
from newsdesk.resolver import ArticleResolver, _unwrap_detail, matches_article

DETAIL = "https://api.example/api/{lang}/5/1/articles/{id}"
DETAIL_AR = "https://api.example/api/ar/5/1/articles/123"
DETAIL_FR = "https://api.example/api/fr/5/1/articles/123"


@pytest.fixture
def sources() -> list[ApiSourceConfig | RssSourceConfig]:
    return [
        ApiSourceConfig(
            id="mosaique",
            name="Mosaique FM",
            endpoint="https://api.example/api/{lang}/{perPage}/{page}/articles",
            detail_endpoint=DETAIL,
        ),
        RssSourceConfig(id="kapitalis", name="Kapitalis", endpoint="https://kapitalis.example/feed"),
    ]


class PageFetcher:
    """Serves canned pages and records which were requested."""

    def __init__(self, pages: dict[int, list[Article]]) -> None:
        self._pages = pages
        self.requested: list[int] = []

    async def __call__(self, page: int) -> list[Article] | None:
        self.requested.append(page)
        return self._pages.get(page)


class TestMatchesArticle:
    def test_matches_slug_tslug_and_id(self) -> None:
        article = make_article(42, slug="src-titre", tslug="politique")
        assert matches_article(article, "src-titre", "src-titre")
        assert matches_article(article, "politique", "politique")
        assert matches_article(article, "42", "42")
        assert not matches_article(article, "src-autre", "src-autre")


class TestUnwrapDetail:
    def test_envelopes(self) -> None:
        body = {"id": 1, "title": "T"}
        assert _unwrap_detail({"item": body}) == body
        assert _unwrap_detail({"article": body}) == body
        assert _unwrap_detail({"data": body}) == body
        assert _unwrap_detail(body) == body
        assert _unwrap_detail(["not", "an", "object"]) is None


class TestArticleResolver:
    def test_rejects_batch_size_below_two(self, sources) -> None:
        with pytest.raises(ValueError, match="batch_size"):
            ArticleResolver(sources, PageFetcher({}), batch_size=1)

    async def test_numeric_id_uses_detail_endpoint(self, sources, fake_http) -> None:
        fake_http.add(
            DETAIL_FR,
            json={"item": {"id": 123, "title": "Détail", "link": "https://m.example/fr/123"}},
        )
        fetch_page = AsyncMock()
        resolver = ArticleResolver(sources, fetch_page)

        result = await resolver.resolve("123")

        assert result.article is not None
        assert result.article.id == 123
        assert result.article.source == "mosaique"
        assert result.attempted_urls == (DETAIL_AR, DETAIL_FR)
        fetch_page.assert_not_awaited()

    async def test_first_language_wins(self, sources, fake_http) -> None:
        fake_http.add(DETAIL_AR, json={"id": 123, "title": "عربي", "link": "https://m.example/ar/123"})
        fake_http.add(DETAIL_FR, json={"id": 123, "title": "Français", "link": "https://m.example/fr/123"})

        result = await ArticleResolver(sources, AsyncMock()).resolve("123")

        assert result.article is not None
        assert result.article.title == "عربي"

    async def test_slug_found_by_page_scan(self, sources, fake_http) -> None:
        target = make_article(7, slug="kapitalis-la-cible")
        fetcher = PageFetcher({1: [make_article(1)], 2: [make_article(2)], 3: [make_article(3), target]})

        result = await ArticleResolver(sources, fetcher, batch_size=2).resolve("kapitalis-la-cible")

        assert result.article == target
        assert result.attempted_urls == ()
        assert sorted(fetcher.requested) == [1, 2, 3, 4]
        assert fake_http.calls == []

    async def test_percent_encoded_slug(self, sources) -> None:
        target = make_article(7, slug="src-été")
        fetcher = PageFetcher({1: [target]})

        result = await ArticleResolver(sources, fetcher).resolve("src-%C3%A9t%C3%A9")

        assert result.article == target

    async def test_numeric_miss_falls_back_to_scan(self, sources, fake_http) -> None:
        target = make_article(123, slug="kapitalis-article")
        fetcher = PageFetcher({2: [target]})

        result = await ArticleResolver(sources, fetcher).resolve("123")

        assert result.article == target
        assert result.attempted_urls == (DETAIL_AR, DETAIL_FR)

    async def test_not_found(self, sources, fake_http) -> None:
        fetcher = PageFetcher({})

        result = await ArticleResolver(sources, fetcher, max_pages=3).resolve("123")

        assert result.article is None
        assert result.attempted_urls == (DETAIL_AR, DETAIL_FR)
        assert sorted(fetcher.requested) == [1, 2, 3]

    async def test_scan_failure_is_a_miss(self, sources) -> None:
        fetch_page = AsyncMock(side_effect=RuntimeError("upstream down"))

        result = await ArticleResolver(sources, fetch_page).resolve("some-slug")

        assert result.article is None
        assert result.attempted_urls == ()
