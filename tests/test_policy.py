"""Tests for pagination and freshness rules."""

from datetime import UTC, datetime

from conftest import make_article

from newsdesk.config.models import ApiSourceConfig, RssSourceConfig
from newsdesk.policy import apply_max_age, is_source_active

NOW = datetime(2024, 1, 10, 12, 0, tzinfo=UTC)


def _rss(**kwargs) -> RssSourceConfig:
    return RssSourceConfig(id="src", name="Source", endpoint="https://src.example/feed", **kwargs)


class TestIsSourceActive:
    def test_regular_source_is_always_active(self) -> None:
        source = _rss()
        assert is_source_active(source, 1)
        assert is_source_active(source, 5)

    def test_first_page_only_source(self) -> None:
        source = ApiSourceConfig(
            id="api", name="API", endpoint="https://api.example/{page}", first_page_only=True
        )
        assert is_source_active(source, 1)
        assert not is_source_active(source, 2)


class TestApplyMaxAge:
    def test_without_max_age_keeps_everything(self) -> None:
        articles = [make_article(1, start_publish="2000-01-01T00:00:00Z"), make_article(2)]
        assert apply_max_age(articles, _rss(), NOW) == articles

    def test_drops_articles_older_than_window(self) -> None:
        fresh = make_article(1, start_publish="2024-01-09T12:00:00Z")
        edge = make_article(2, start_publish="2024-01-08T12:00:00Z")
        stale = make_article(3, start_publish="2024-01-08T11:59:59Z")
        kept = apply_max_age([fresh, edge, stale], _rss(max_age_days=2), NOW)
        assert [a.id for a in kept] == [1, 2]

    def test_undated_articles_are_dropped_when_window_is_set(self) -> None:
        undated = make_article(1)
        assert apply_max_age([undated], _rss(max_age_days=30), NOW) == []
