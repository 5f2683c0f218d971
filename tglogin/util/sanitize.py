"""Sanitizers for values that come from the Telegram payload."""

import html
import re
import unicodedata
from urllib.parse import urlsplit

_TAG_RE = re.compile(r"<[^>]*>")
_OCTET_RE = re.compile(r"%[a-fA-F0-9]{2}")
_ENTITY_RE = re.compile(r"&.+?;")
_LOGIN_STRICT_RE = re.compile(r"[^a-zA-Z0-9 _.\-@]")
_WHITESPACE_RE = re.compile(r"\s+")
_URL_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9\-~+_.?#=!&;,/:%@$|*'()\[\]\x80-\uffff]")

ALLOWED_URL_SCHEMES = ("http", "https")


def escape_text(value: str) -> str:
    """HTML-escape a payload value before it is stored."""
    return html.escape(value, quote=True)


def remove_accents(value: str) -> str:
    """Replace accented letters with their base letter."""
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def sanitize_login_name(value: str, strict: bool = True) -> str:
    """Reduce a string to a safe login name.

    Strips tags, accents, percent-encoded octets and HTML entities. In strict
    mode only ASCII letters, digits, space and ``_ . - @`` survive.

    Args:
        value: Raw login name
        strict: Drop every character outside the safe set

    Returns:
        Sanitized login name (may be empty)
    """
    name = _TAG_RE.sub("", value)
    name = remove_accents(name)
    name = _OCTET_RE.sub("", name)
    name = _ENTITY_RE.sub("", name)
    if strict:
        name = _LOGIN_STRICT_RE.sub("", name)
    return _WHITESPACE_RE.sub(" ", name.strip())


def sanitize_url(value: str) -> str | None:
    """Clean a URL for storage, or return None if it is not http(s).

    Args:
        value: Raw URL

    Returns:
        URL with unsafe characters removed, None when the scheme is not allowed
    """
    url = value.strip().replace(" ", "%20")
    url = _URL_UNSAFE_RE.sub("", url)
    if not url:
        return None
    if urlsplit(url).scheme.lower() not in ALLOWED_URL_SCHEMES:
        return None
    return url
