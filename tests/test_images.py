"""Tests for article page image lookup."""

import httpx

from newsdesk.sources.images import NoOpImageResolver, OpenGraphImageResolver, extract_image_url

PAGE = "https://src.example/article"


def test_extract_og_image() -> None:
    html = '<head><meta property="og:image" content="https://img.example/og.jpg"></head>'
    assert extract_image_url(html) == "https://img.example/og.jpg"


def test_extract_prefers_og_over_twitter() -> None:
    html = (
        '<meta name="twitter:image" content="https://img.example/tw.jpg">'
        '<meta property="og:image" content="https://img.example/og.jpg">'
    )
    assert extract_image_url(html) == "https://img.example/og.jpg"


def test_extract_twitter_image() -> None:
    html = '<meta name="twitter:image" content="https://img.example/tw.jpg">'
    assert extract_image_url(html) == "https://img.example/tw.jpg"


def test_extract_featured_image_unescapes_slashes() -> None:
    html = r'<script>{"featuredImage":"https:\/\/lapresse.tn\/img.jpg"}</script>'
    assert extract_image_url(html) == "https://lapresse.tn/img.jpg"


def test_extract_nothing() -> None:
    assert extract_image_url("<html><body>No image</body></html>") is None


async def test_open_graph_resolver(fake_http) -> None:
    fake_http.add(PAGE, content='<meta property="og:image" content="https://img.example/a.jpg">')

    async with httpx.AsyncClient() as client:
        image = await OpenGraphImageResolver(timeout=1.0).resolve(client, PAGE)

    assert image == "https://img.example/a.jpg"


async def test_open_graph_resolver_swallows_http_errors(fake_http) -> None:
    fake_http.fail(PAGE, httpx.ReadTimeout("timed out"))

    async with httpx.AsyncClient() as client:
        assert await OpenGraphImageResolver().resolve(client, PAGE) is None
        assert await OpenGraphImageResolver().resolve(client, "https://src.example/missing") is None


async def test_noop_resolver() -> None:
    async with httpx.AsyncClient() as client:
        assert await NoOpImageResolver().resolve(client, PAGE) is None
