"""Tests for core data models."""

from dataclasses import FrozenInstanceError, replace

import pytest

from newsdesk.data import Article, ArticleDetailResult, SourceInfo


class TestArticle:
    def test_defaults(self) -> None:
        article = Article(id=1, title="T", slug="src-t", link="https://x", source="src")
        assert article.intro == ""
        assert article.summary is None
        assert article.image == ""
        assert article.start_publish is None
        assert article.category is None
        assert article.first_item is False

    def test_is_frozen(self) -> None:
        article = Article(id=1, title="T", slug="src-t", link="https://x", source="src")
        with pytest.raises(FrozenInstanceError):
            article.title = "Changed"  # type: ignore[misc]

    def test_replace_creates_new_instance(self) -> None:
        article = Article(id=1, title="T", slug="src-t", link="https://x", source="src")
        with_image = replace(article, image="https://img/x.jpg")
        assert with_image.image == "https://img/x.jpg"
        assert article.image == ""


def test_detail_result_defaults() -> None:
    result = ArticleDetailResult(article=None)
    assert result.attempted_urls == ()


def test_source_info_is_hashable() -> None:
    info = SourceInfo(id="rtci", name="RTCI", type="rss", first_page_only=True)
    assert info in {info}
