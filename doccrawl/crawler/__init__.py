# doccrawl/crawler/__init__.py
"""Crawler core: robots.txt policy, single-page spider and the traversal engine."""

from doccrawl.crawler.crawler import Crawler
from doccrawl.crawler.errors import CrawlerError, FetchError, InvalidStartUrl, NotHtmlError, SpiderError
from doccrawl.crawler.models import Message, PageResult, Result, StreamEvent
from doccrawl.crawler.robots import RobotsTxt
from doccrawl.crawler.spider import Spider

__all__ = [
    "Crawler",
    "CrawlerError",
    "FetchError",
    "InvalidStartUrl",
    "Message",
    "NotHtmlError",
    "PageResult",
    "Result",
    "RobotsTxt",
    "Spider",
    "SpiderError",
    "StreamEvent",
]
