# File: doccrawl/utils.py
"""doccrawl.utils: URL helpers shared by the robots engine, the spider and the crawler."""

from __future__ import annotations

from typing import Optional, Sequence
from urllib.parse import urlsplit, urlunsplit

__all__: Sequence[str] = (
    "display_url",
    "is_absolute_url",
    "normalize_path",
    "origin_of",
    "relative_depth",
    "robots_url",
    "same_host",
    "url_path",
)


def is_absolute_url(url: str) -> bool:
    """True for an http(s) URL with a host."""
    try:
        parsed = urlsplit(url)
        parsed.port  # ValueError for a non-numeric or out-of-range port
        return parsed.scheme in ("http", "https") and bool(parsed.hostname)
    except ValueError:
        return False


def url_path(url: str) -> str:
    """Path component of *url*; the root of a bare origin is ``/``."""
    return urlsplit(url).path or "/"


def normalize_path(url: str) -> str:
    """Visited-set identity of *url*: its path with trailing slashes stripped."""
    return urlsplit(url).path.rstrip("/")


def origin_of(url: str) -> str:
    """``scheme://netloc`` of *url*."""
    parsed = urlsplit(url)
    return urlunsplit((parsed.scheme, parsed.netloc, "", "", ""))


def robots_url(url: str) -> str:
    """Location of the robots.txt file governing *url*."""
    return f"{origin_of(url)}/robots.txt"


def same_host(url: str, host: Optional[str]) -> bool:
    """Exact hostname comparison, no subdomain matching."""
    return host is not None and urlsplit(url).hostname == host


def relative_depth(base_path: str, path: str) -> int:
    """Number of path segments *path* adds below *base_path*.

    Both paths are compared without trailing slashes. A path that does not
    extend *base_path* (a sibling, a parent, or ``/onex`` next to ``/one``)
    scores 0, the same as the base path itself.
    """
    base = base_path.rstrip("/")
    path = path.rstrip("/")
    if path == base or not path.startswith(base):
        return 0
    return path[len(base):].count("/")


def display_url(url: str) -> str:
    """``scheme://host[:port]/path`` of *url*, without credentials, query or fragment."""
    parsed = urlsplit(url)
    host = parsed.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    if parsed.port is not None:
        host = f"{host}:{parsed.port}"
    return f"{parsed.scheme}://{host}{parsed.path}"
