"""Data models for Newsdesk."""

from newsdesk.data.models import Article, ArticleDetailResult, DateValue, SourceInfo

__all__ = [
    "Article",
    "ArticleDetailResult",
    "DateValue",
    "SourceInfo",
]
