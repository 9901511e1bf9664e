# doccrawl/__init__.py
"""
doccrawl package initializer.
Defines package version and exposes the crawler core.
"""
__version__ = "0.1.0"

from doccrawl.crawler import Crawler, Message, PageResult, Result, RobotsTxt, Spider

__all__ = ["Crawler", "Message", "PageResult", "Result", "RobotsTxt", "Spider", "__version__"]
