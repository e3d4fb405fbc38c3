"""Source URL checks for captured posts."""

from __future__ import annotations

from urllib.parse import urlsplit

ALLOWED_HOSTS = frozenset({"x.com", "twitter.com"})


def is_allowed_url(raw_url: str | None) -> bool:
    """True iff ``raw_url`` is an absolute URL whose host is exactly x.com or twitter.com."""
    if not raw_url or not isinstance(raw_url, str):
        return False
    try:
        parts = urlsplit(raw_url.strip())
        host = parts.hostname
    except ValueError:
        return False
    if not parts.scheme or not host:
        return False
    return host.lower() in ALLOWED_HOSTS
