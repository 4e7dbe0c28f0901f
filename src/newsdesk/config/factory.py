"""Factory functions to create components from configuration."""

from pathlib import Path

from newsdesk.aggregator import NewsAggregator
from newsdesk.config.models import (
    ApiSourceConfig,
    HttpConfig,
    NewsdeskConfig,
    RssSourceConfig,
)
from newsdesk.run_logger import RunLogger
from newsdesk.service import NewsService
from newsdesk.sources.api import ApiSourceAdapter
from newsdesk.sources.base import SourceAdapter
from newsdesk.sources.images import OpenGraphImageResolver
from newsdesk.sources.rss import RssSourceAdapter


def create_adapter(
    config: ApiSourceConfig | RssSourceConfig,
    http: HttpConfig | None = None,
) -> SourceAdapter:
    """Create a source adapter from config.

    Uses explicit type matching rather than getattr.
    """
    http = http or HttpConfig()
    if isinstance(config, ApiSourceConfig):
        return ApiSourceAdapter(config)
    if isinstance(config, RssSourceConfig):
        return RssSourceAdapter(
            config,
            image_resolver=OpenGraphImageResolver(
                timeout=http.image_timeout_seconds,
                user_agent=http.user_agent,
            ),
            max_image_lookups=http.max_image_lookups,
        )
    # Type checker ensures this is exhaustive
    msg = f"Unknown source config type: {type(config)}"
    raise ValueError(msg)


def create_aggregator(
    config: NewsdeskConfig,
    run_logger: RunLogger | None = None,
) -> NewsAggregator:
    """Create an aggregator over every configured source."""
    adapters = [create_adapter(source, config.http) for source in config.sources]
    return NewsAggregator(
        adapters,
        timeout=config.http.timeout_seconds,
        user_agent=config.http.user_agent,
        run_logger=run_logger,
    )


def create_service(
    config: NewsdeskConfig,
    run_logger: RunLogger | None = None,
) -> NewsService:
    """Create the cached news service."""
    return NewsService(
        create_aggregator(config, run_logger=run_logger),
        revalidate_seconds=config.cache.revalidate_seconds,
        max_pages=config.resolver.max_pages,
        batch_size=config.resolver.batch_size,
        timeout=config.http.timeout_seconds,
        user_agent=config.http.user_agent,
    )


def create_from_config(
    config: NewsdeskConfig,
    *,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> tuple[NewsService, RunLogger | None]:
    """Create the service from root config.

    Args:
        config: Root configuration.
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.

    Returns:
        Tuple of (service, run_logger).
        run_logger is None if logging is disabled.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)

    run_logger: RunLogger | None = None
    if log_enabled:
        run_logger = RunLogger(log_dir=log_dir, enabled=True)

    return (create_service(config, run_logger=run_logger), run_logger)
