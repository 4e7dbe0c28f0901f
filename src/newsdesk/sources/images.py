"""Best-effort lookup of a lead image from an article's web page."""

import logging
import re
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)

_OG_IMAGE_RE = re.compile(r'<meta property="og:image" content="([^"]+)"', re.IGNORECASE)
_TWITTER_IMAGE_RE = re.compile(r'<meta name="twitter:image" content="([^"]+)"', re.IGNORECASE)
# WordPress themes (La Presse) embed the image in page JSON with escaped slashes.
_FEATURED_IMAGE_RE = re.compile(r'"featuredImage":"([^"]+)"')


class ImageResolver(Protocol):
    """Interface for finding an image URL for an article page."""

    async def resolve(self, client: httpx.AsyncClient, page_url: str) -> str | None:
        """Return an image URL for ``page_url``, or None if none is found."""
        ...


class NoOpImageResolver:
    """Resolver that never finds anything (tests, offline runs)."""

    async def resolve(self, client: httpx.AsyncClient, page_url: str) -> str | None:
        return None


class OpenGraphImageResolver:
    """Fetch the article page and scan it for Open Graph / Twitter card images.

    Args:
        timeout: Per-request timeout in seconds, independent of the feed fetch.
        user_agent: User-Agent header sent to the article site.
    """

    def __init__(self, *, timeout: float = 5.0, user_agent: str | None = None) -> None:
        self._timeout = timeout
        self._headers = {"User-Agent": user_agent} if user_agent else {}

    async def resolve(self, client: httpx.AsyncClient, page_url: str) -> str | None:
        try:
            response = await client.get(page_url, headers=self._headers, timeout=self._timeout)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.debug(f"Image lookup failed for {page_url}: {e}")
            return None
        return extract_image_url(response.text)


def extract_image_url(html: str) -> str | None:
    """Pull the first og:image, twitter:image or featuredImage URL from HTML."""
    for pattern in (_OG_IMAGE_RE, _TWITTER_IMAGE_RE):
        match = pattern.search(html)
        if match:
            return match.group(1)
    match = _FEATURED_IMAGE_RE.search(html)
    if match:
        return match.group(1).replace("\\", "")
    return None
