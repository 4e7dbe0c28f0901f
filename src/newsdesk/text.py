"""Text and field normalization helpers.

Upstream fields arrive in several shapes (plain strings, feedparser detail
objects, text-node or CDATA wrappers, lists of any of these). Everything in
this module is pure and never raises on malformed input.
"""

import re
import unicodedata
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

INTRO_MAX_LENGTH = 280
ELLIPSIS = "..."

# Keys under which a wrapped text payload may live, checked in order.
_TEXT_PAYLOAD_KEYS = ("__cdata", "#text", "value", "term")

_HTML_ENTITIES: dict[str, str] = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&#8217;": "'",
    "&#8211;": "-",
    "&#8212;": "—",
    "&#8230;": "...",
    "&#233;": "é",
    "&#232;": "è",
    "&#224;": "à",
    "&#226;": "â",
    "&#234;": "ê",
    "&#238;": "î",
    "&#244;": "ô",
    "&#251;": "û",
    "&#231;": "ç",
    "&#171;": "«",
    "&#187;": "»",
}

_ENTITY_RE = re.compile(r"&[a-zA-Z0-9#]+;")
_TAG_RE = re.compile(r"<[^>]*>")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_TEMPLATE_TOKEN_RE = re.compile(r"\{(\w+)\}")


def text_content(value: Any) -> str:
    """Extract plain text from a raw field value.

    Args:
        value: A string, ``None``, a mapping wrapping a text payload, a list
            whose first element is any of these, or a scalar.

    Returns:
        The extracted text, or ``""`` when there is none.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        for key in _TEXT_PAYLOAD_KEYS:
            payload = value.get(key)
            if isinstance(payload, str):
                return payload
        return ""
    if isinstance(value, (list, tuple)):
        return text_content(value[0]) if value else ""
    return str(value)


def slugify(value: Any) -> str:
    """Turn a title or label into a lowercase ASCII slug.

    Diacritics are removed after NFKD decomposition; any run of characters
    outside ``[a-z0-9]`` collapses to a single hyphen. Input with no Latin
    letters or digits produces ``""``, so callers must supply a fallback.
    """
    decomposed = unicodedata.normalize("NFKD", text_content(value).lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM_RE.sub("-", stripped).strip("-")


def hash_string(value: str) -> int:
    """Deterministic non-negative 32-bit rolling hash (``h * 31 + unit``).

    Iterates over UTF-16 code units so ids stay identical to the ones
    published by the web front end for the same content.
    """
    data = value.encode("utf-16-le", "surrogatepass")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def _decode_entity(match: re.Match[str]) -> str:
    entity = match.group(0)
    known = _HTML_ENTITIES.get(entity)
    if known is not None:
        return known
    if entity.startswith("&#"):
        try:
            return chr(int(entity[2:-1]))
        except (ValueError, OverflowError):
            return entity
    return entity


def strip_html(html: str | None) -> str:
    """Decode common entities, drop tags and trim whitespace."""
    if not html:
        return ""
    text = _ENTITY_RE.sub(_decode_entity, html)
    text = _TAG_RE.sub("", text)
    return text.strip()


def make_intro(text: str) -> str:
    """Truncate plain text to the excerpt length, marking the cut."""
    if len(text) > INTRO_MAX_LENGTH:
        return text[: INTRO_MAX_LENGTH - len(ELLIPSIS)] + ELLIPSIS
    return text


def normalize_image_url(url: str | None, base_url: str | None = None) -> str:
    """Make an image URL absolute and HTTPS.

    Protocol-relative URLs get ``https:``, root-relative paths are prefixed
    with ``base_url`` (when given) and plain HTTP is upgraded.
    """
    if not url:
        return ""
    url = url.strip()
    if not url:
        return ""
    if url.startswith("//"):
        return f"https:{url}"
    if url.startswith("/"):
        if base_url:
            return f"{base_url.rstrip('/')}{url}"
        return url
    if url.startswith("http://"):
        return "https://" + url[len("http://") :]
    return url


def fill_endpoint_template(template: str, values: Mapping[str, Any]) -> str:
    """Substitute ``{token}`` placeholders with percent-encoded values.

    Tokens with no value are replaced by an empty string.
    """

    def _replace(match: re.Match[str]) -> str:
        value = values.get(match.group(1))
        return quote("" if value is None else str(value), safe="!*'()")

    return _TEMPLATE_TOKEN_RE.sub(_replace, template)
