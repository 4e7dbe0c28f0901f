#!/usr/bin/env python
"""CLI for the Newsdesk aggregation pipeline."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from newsdesk.config import get_default_config_path, load_config
from newsdesk.config.factory import create_from_config
from newsdesk.data import Article
from newsdesk.dates import resolve_publish_date
from newsdesk.service import NewsService

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    command: Literal["posts", "article", "sources"]
    config: Path
    page: int = Field(default=1, ge=1)
    sources: list[str] = Field(default_factory=list)
    slug: str | None = None
    log: bool = False
    log_dir: str = "logs"

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v


def _print_article(index: int, article: Article) -> None:
    published = resolve_publish_date(article)
    logger.info(f"{index}. {article.title}")
    logger.info(f"   Source: {article.source}  Label: {article.label}")
    logger.info(f"   Slug: {article.slug}")
    logger.info(f"   URL: {article.link}")
    if published:
        logger.info(f"   Published: {published.display} ({published.iso})")


async def _run_posts(service: NewsService, args: CLIArgs) -> None:
    articles = await service.fetch_posts(args.page, args.sources or None)
    if not articles:
        print(f"\nNo articles for page {args.page}.")
        return
    print(f"\nFound {len(articles)} articles on page {args.page}:\n")
    for i, article in enumerate(articles, 1):
        _print_article(i, article)


async def _run_article(service: NewsService, args: CLIArgs) -> None:
    result = await service.fetch_article_by_slug(args.slug or "")
    if result.article is None:
        print(f"\nArticle not found: {args.slug}")
    else:
        _print_article(1, result.article)
        if result.article.intro:
            logger.info(f"\n{result.article.intro}")
    if result.attempted_urls:
        logger.info("\nDetail URLs attempted:")
        for url in result.attempted_urls:
            logger.info(f"   {url}")


async def run(args: CLIArgs) -> None:
    """Execute the requested command with the given configuration.

    Args:
        args: Validated CLI arguments.
    """
    config = load_config(args.config)
    service, run_logger = create_from_config(
        config,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )
    logger.info(f"Config: {args.config}")

    if args.command == "sources":
        for info in service.catalog():
            flags = []
            if info.first_page_only:
                flags.append("first page only")
            if info.max_age_days:
                flags.append(f"max age {info.max_age_days}d")
            suffix = f" ({', '.join(flags)})" if flags else ""
            logger.info(f"{info.id:<20} {info.type:<4} {info.name}{suffix}")
        return

    if args.command == "posts":
        await _run_posts(service, args)
    else:
        await _run_article(service, args)

    if run_logger and run_logger.last_log_path:
        logger.info(f"\nRun log written to: {run_logger.last_log_path}")


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Aggregate news from API and RSS sources.")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Enable per-source fetch logging to JSON files",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    posts_parser = subparsers.add_parser("posts", help="Print one merged page of articles")
    posts_parser.add_argument("--page", "-p", type=int, default=1, help="Page number (default: 1)")
    posts_parser.add_argument(
        "--source",
        "-s",
        action="append",
        default=[],
        dest="sources",
        help="Restrict to a source id (repeatable)",
    )

    article_parser = subparsers.add_parser("article", help="Resolve one article by slug or id")
    article_parser.add_argument("slug", help="Article slug or numeric id")

    subparsers.add_parser("sources", help="List configured sources")

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            command=ns.command,
            config=config_path,
            page=getattr(ns, "page", 1),
            sources=getattr(ns, "sources", []),
            slug=getattr(ns, "slug", None),
            log=ns.log,
            log_dir=ns.log_dir,
        )
    except Exception as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
