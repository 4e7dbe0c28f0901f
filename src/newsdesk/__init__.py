"""Newsdesk: multi-source news ingestion, normalization and lookup."""

from newsdesk.aggregator import NewsAggregator
from newsdesk.cache import ALL_SOURCES_KEY, PostsCache, normalize_sources_key, parse_sources_key
from newsdesk.config import (
    ApiSourceConfig,
    NewsdeskConfig,
    RssSourceConfig,
    load_config,
)
from newsdesk.config.factory import create_from_config
from newsdesk.data import Article, ArticleDetailResult, SourceInfo
from newsdesk.dates import PublishDate, article_timestamp, resolve_publish_date
from newsdesk.resolver import ArticleResolver
from newsdesk.run_logger import RunLogger
from newsdesk.service import NewsService
from newsdesk.sources import (
    ApiSourceAdapter,
    ImageResolver,
    NoOpImageResolver,
    OpenGraphImageResolver,
    RssSourceAdapter,
    SourceAdapter,
    SourceResult,
)
from newsdesk.text import hash_string, slugify, strip_html, text_content

__all__ = [
    # Models
    "Article",
    "ArticleDetailResult",
    "PublishDate",
    "SourceInfo",
    "SourceResult",
    # Functions
    "article_timestamp",
    "hash_string",
    "normalize_sources_key",
    "parse_sources_key",
    "resolve_publish_date",
    "slugify",
    "strip_html",
    "text_content",
    # Protocols
    "ImageResolver",
    "SourceAdapter",
    # Adapters
    "ApiSourceAdapter",
    "NoOpImageResolver",
    "OpenGraphImageResolver",
    "RssSourceAdapter",
    # Pipeline
    "ALL_SOURCES_KEY",
    "ArticleResolver",
    "NewsAggregator",
    "NewsService",
    "PostsCache",
    # Logging
    "RunLogger",
    # Config
    "ApiSourceConfig",
    "NewsdeskConfig",
    "RssSourceConfig",
    "create_from_config",
    "load_config",
]
