"""Utilities to classify visited URLs and reduce them to domains."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlsplit

INTERNAL_URL_PREFIXES: tuple[str, ...] = (
    "chrome://",
    "chrome-extension://",
    "about:",
    "data:",
    "file:",
    "blob:",
    "javascript:",
)

_WWW_PREFIX = "www."


def is_internal_url(url: str) -> bool:
    """Return True for browser-internal pages that are not real navigations."""
    return url.startswith(INTERNAL_URL_PREFIXES)


def extract_domain(url: str) -> Optional[str]:
    """Return the host of an absolute URL without a leading ``www.``."""
    try:
        parts = urlsplit(url.strip())
        host = parts.hostname
    except ValueError:
        return None
    if not parts.scheme or not host:
        return None
    if host.startswith(_WWW_PREFIX):
        host = host[len(_WWW_PREFIX):]
    return host or None
