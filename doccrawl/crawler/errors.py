# doccrawl/crawler/errors.py
"""
Exceptions raised by the crawler core.
"""
from __future__ import annotations

from typing import Optional


class CrawlerError(Exception):
    """Base class for every doccrawl error."""


class InvalidStartUrl(CrawlerError, ValueError):
    """The crawl cannot start because its URL is not an absolute http(s) URL."""

    def __init__(self, url: str) -> None:
        super().__init__(f"not an absolute http(s) URL: {url!r}")
        self.url = url


class SpiderError(CrawlerError):
    """A single page could not be turned into a PageResult."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class FetchError(SpiderError):
    def __init__(self, url: str, reason: str, status: Optional[int] = None) -> None:
        super().__init__(url, reason)
        self.status = status


class NotHtmlError(SpiderError):
    def __init__(self, url: str) -> None:
        super().__init__(url, "content is not HTML")
