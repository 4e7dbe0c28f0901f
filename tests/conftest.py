"""Shared fixtures: a routed fake for ``httpx.AsyncClient.get`` and builders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from newsdesk.data import Article


@dataclass
class FakeHttp:
    """Routes fake GET requests by exact URL; unknown URLs answer 404."""

    responses: dict[str, httpx.Response | Exception] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    def add(
        self,
        url: str,
        *,
        status: int = 200,
        json: Any = None,
        content: bytes | str | None = None,
    ) -> None:
        request = httpx.Request("GET", url)
        if json is not None:
            self.responses[url] = httpx.Response(status, json=json, request=request)
        else:
            self.responses[url] = httpx.Response(status, content=content or b"", request=request)

    def fail(self, url: str, error: Exception) -> None:
        self.responses[url] = error

    async def get(self, url: str) -> httpx.Response:
        url = str(url)
        self.calls.append(url)
        response = self.responses.get(url)
        if response is None:
            return httpx.Response(404, request=httpx.Request("GET", url))
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake_http(monkeypatch: pytest.MonkeyPatch) -> FakeHttp:
    """Patch ``httpx.AsyncClient.get`` so no request leaves the process."""
    fake = FakeHttp()

    async def mock_get(self, url, *args, **kwargs):
        return await fake.get(url)

    monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)
    return fake


def make_article(
    article_id: int,
    source: str = "src",
    *,
    start_publish: Any = None,
    slug: str | None = None,
    **kwargs: Any,
) -> Article:
    """Build an Article with just enough fields for pipeline tests."""
    return Article(
        id=article_id,
        title=kwargs.pop("title", f"Article {article_id}"),
        slug=slug or f"{source}-article-{article_id}",
        link=kwargs.pop("link", f"https://{source}.example/{article_id}"),
        source=source,
        start_publish=start_publish,
        **kwargs,
    )
