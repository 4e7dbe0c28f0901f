"""Configuration module for Newsdesk.

The component factory lives in ``newsdesk.config.factory``; it is not
re-exported here because the components themselves import these models.
"""

from newsdesk.config.loader import get_default_config_path, load_config
from newsdesk.config.models import (
    ApiSourceConfig,
    CacheConfig,
    HttpConfig,
    LoggingConfig,
    NewsdeskConfig,
    NewsSourceConfig,
    ResolverConfig,
    RssSourceConfig,
)

__all__ = [
    "ApiSourceConfig",
    "CacheConfig",
    "HttpConfig",
    "LoggingConfig",
    "NewsSourceConfig",
    "NewsdeskConfig",
    "ResolverConfig",
    "RssSourceConfig",
    "get_default_config_path",
    "load_config",
]
