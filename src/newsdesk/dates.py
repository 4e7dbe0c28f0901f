"""Resolution of an article's redundant date fields into one instant.

Articles carry up to four date-bearing fields whose shape depends on the
upstream: datetimes, epoch seconds or milliseconds, ISO or free-text strings,
and ``{"date": ..., "timezone": ...}`` records. Sorting and display both go
through ``resolve_publish_date`` so they always agree on the candidate used.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from email.utils import parsedate_to_datetime
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as dtparser

from newsdesk.data import Article

# Numbers below this are epoch seconds, anything above is milliseconds.
EPOCH_MS_THRESHOLD = 10_000_000_000
DISPLAY_FORMAT = "%d/%m/%Y"

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_DIGITS_RE = re.compile(r"[0-9]+")
_SUB_MILLISECOND_RE = re.compile(r"\.(\d{3})\d+$")


@dataclass(frozen=True)
class ParsedDate:
    """A parsed instant plus the timezone it was published in, if known."""

    date: datetime
    timezone: str | None = None


@dataclass(frozen=True)
class PublishDate:
    """The authoritative publication date of an article."""

    date: datetime
    iso: str
    display: str
    timezone: str | None = None


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_iso(value: datetime) -> str:
    """Format an instant as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    value = _as_utc(value)
    return f"{value:%Y-%m-%dT%H:%M:%S}.{value.microsecond // 1000:03d}Z"


def parse_numeric_date(value: float) -> datetime | None:
    """Interpret a number as epoch seconds or epoch milliseconds."""
    seconds = value if value < EPOCH_MS_THRESHOLD else value / 1000
    try:
        return datetime.fromtimestamp(seconds, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def parse_date_string(raw: str) -> datetime | None:
    """Parse a date string, trying progressively looser interpretations.

    Order: all-digit epoch, ISO 8601 variants (space separator replaced,
    sub-millisecond digits dropped, ``Z`` appended), RFC 2822, then a
    free-text parse. Naive results are taken as UTC.
    """
    trimmed = raw.strip()
    if not trimmed:
        return None

    if _DIGITS_RE.fullmatch(trimmed):
        try:
            return parse_numeric_date(int(trimmed))
        except (ValueError, OverflowError):
            return None

    normalized = trimmed.replace(" ", "T", 1)
    normalized = _SUB_MILLISECOND_RE.sub(r".\1", normalized)

    for candidate in (normalized, f"{normalized}Z", trimmed, f"{trimmed}Z"):
        try:
            return _as_utc(datetime.fromisoformat(candidate))
        except ValueError:
            continue
        except OverflowError:
            return None

    try:
        return _as_utc(parsedate_to_datetime(trimmed))
    except (TypeError, ValueError, IndexError, OverflowError):
        pass

    try:
        return _as_utc(dtparser.parse(trimmed))
    except (ValueError, OverflowError):
        return None


def parse_date_value(value: Any) -> ParsedDate | None:
    """Resolve a single raw date candidate, or ``None`` if it is unusable."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        try:
            return ParsedDate(date=_as_utc(value))
        except OverflowError:
            return None

    if isinstance(value, (int, float)):
        parsed = parse_numeric_date(value)
        return ParsedDate(date=parsed) if parsed else None

    if isinstance(value, str):
        parsed = parse_date_string(value)
        return ParsedDate(date=parsed) if parsed else None

    if isinstance(value, Mapping):
        raw = value.get("date")
        if not isinstance(raw, str):
            return None
        parsed = parse_date_string(raw)
        if parsed is None:
            return None
        timezone = value.get("timezone")
        return ParsedDate(date=parsed, timezone=timezone if isinstance(timezone, str) else None)

    return None


def format_display(value: datetime, timezone: str | None = None) -> str:
    """Format a date as ``dd/mm/yyyy`` in ``timezone`` (UTC when unknown)."""
    zone = UTC
    if timezone:
        try:
            zone = ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError):
            zone = UTC
    try:
        return value.astimezone(zone).strftime(DISPLAY_FORMAT)
    except OverflowError:
        return value.astimezone(UTC).strftime(DISPLAY_FORMAT)


def resolve_publish_date(article: Article) -> PublishDate | None:
    """Pick the first resolvable date among the article's date fields.

    Precedence: ``start_publish``, ``date``, ``created``, ``updated``.
    """
    for candidate in (article.start_publish, article.date, article.created, article.updated):
        parsed = parse_date_value(candidate)
        if parsed is None:
            continue
        return PublishDate(
            date=parsed.date,
            iso=to_iso(parsed.date),
            display=format_display(parsed.date, parsed.timezone),
            timezone=parsed.timezone,
        )
    return None


def article_timestamp(article: Article) -> int:
    """Epoch milliseconds of the article's publish date, 0 when unresolved."""
    resolved = resolve_publish_date(article)
    if resolved is None:
        return 0
    return (resolved.date - _EPOCH) // timedelta(milliseconds=1)
