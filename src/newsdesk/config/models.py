"""Pydantic configuration models for Newsdesk components."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator

# ============================================================
# Source Configs
# ============================================================


class ApiSourceConfig(BaseModel):
    """A paginated JSON API source.

    ``endpoint`` is a template whose ``{page}``, ``{perPage}`` and ``params``
    tokens are substituted per request.
    """

    type: Literal["api"] = "api"
    id: str
    name: str
    endpoint: str
    per_page: int = 24
    params: dict[str, str | int] = Field(default_factory=dict)
    first_page_only: bool = False
    max_age_days: int | None = None
    enabled_by_default: bool = True
    image_base_url: str | None = None
    detail_endpoint: str | None = None
    detail_langs: tuple[str, ...] = ("ar", "fr")

    model_config = {"frozen": True}


class RssSourceConfig(BaseModel):
    """An RSS or Atom feed source."""

    type: Literal["rss"] = "rss"
    id: str
    name: str
    endpoint: str
    first_page_only: bool = False
    max_age_days: int | None = None
    enabled_by_default: bool = True
    fetch_og_images: bool = True

    model_config = {"frozen": True}


NewsSourceConfig = Annotated[
    ApiSourceConfig | RssSourceConfig,
    Field(discriminator="type"),
]


# ============================================================
# Runtime Configs
# ============================================================


class CacheConfig(BaseModel):
    """Revalidation window for merged pages."""

    revalidate_seconds: float = 60.0

    model_config = {"frozen": True}


class HttpConfig(BaseModel):
    """Outbound HTTP settings shared by all adapters."""

    timeout_seconds: float = 15.0
    image_timeout_seconds: float = 5.0
    max_image_lookups: int = 10
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    model_config = {"frozen": True}


class ResolverConfig(BaseModel):
    """Bounds of the paginated article lookup."""

    max_pages: int = Field(default=8, ge=1)
    batch_size: int = Field(default=2, ge=2)

    model_config = {"frozen": True}


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Configuration for JSON fetch-run logging."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class NewsdeskConfig(BaseModel):
    """Root configuration for Newsdesk."""

    sources: list[NewsSourceConfig] = Field(default_factory=list)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}

    @field_validator("sources")
    @classmethod
    def source_ids_must_be_unique(
        cls, v: list[ApiSourceConfig | RssSourceConfig]
    ) -> list[ApiSourceConfig | RssSourceConfig]:
        seen: set[str] = set()
        for source in v:
            if source.id in seen:
                raise ValueError(f"Duplicate source id: {source.id}")
            seen.add(source.id)
        return v
