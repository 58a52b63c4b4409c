from __future__ import annotations

from urllib.parse import urlsplit

from url_extract.errors import InvalidUrlError

ALLOWED_SCHEMES = {"http", "https"}


def validate_url(url: str) -> str:
    """Return *url* stripped of surrounding whitespace, or raise InvalidUrlError."""
    if not isinstance(url, str):
        raise InvalidUrlError(f"URL must be a string, got {type(url).__name__}")
    candidate = url.strip()
    if not candidate or any(ch.isspace() for ch in candidate):
        raise InvalidUrlError(f"Not an absolute URL: {url!r}", url=url)
    try:
        parts = urlsplit(candidate)
        # .port raises ValueError on a malformed port.
        parts.port
    except ValueError as exc:
        raise InvalidUrlError(f"Not an absolute URL: {url!r} ({exc})", url=url) from exc
    if parts.scheme.lower() not in ALLOWED_SCHEMES or not parts.hostname:
        raise InvalidUrlError(f"Not an absolute URL: {url!r}", url=url)
    return candidate
