"""Source adapters that translate upstream APIs and feeds into Articles."""

from newsdesk.sources.api import ApiSourceAdapter, map_api_item
from newsdesk.sources.base import SourceAdapter, SourceResult
from newsdesk.sources.images import ImageResolver, NoOpImageResolver, OpenGraphImageResolver
from newsdesk.sources.rss import RssSourceAdapter, map_rss_entry, parse_feed

__all__ = [
    "ApiSourceAdapter",
    "ImageResolver",
    "NoOpImageResolver",
    "OpenGraphImageResolver",
    "RssSourceAdapter",
    "SourceAdapter",
    "SourceResult",
    "map_api_item",
    "map_rss_entry",
    "parse_feed",
]
