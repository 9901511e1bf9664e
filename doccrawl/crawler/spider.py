# doccrawl/crawler/spider.py
"""
Spider: fetches exactly one page and extracts its title and same-origin links.
"""
from __future__ import annotations

import asyncio
from typing import List
from urllib.parse import urljoin, urlsplit

from aiohttp import ClientError, ClientSession
from bs4 import BeautifulSoup
from bs4.element import Tag

from doccrawl.config import USER_AGENT_NAME
from doccrawl.crawler.errors import FetchError, NotHtmlError
from doccrawl.crawler.models import PageResult
from doccrawl.utils import is_absolute_url, same_host

EXPECTED_CONTENT_TYPE = "text/html"
_HTML_PREFIXES = ("<!doctype html>", "<html")


def sniff_html(body: str) -> bool:
    """True when *body* opens like an HTML document."""
    return body.lower().startswith(_HTML_PREFIXES)


def extract_title(soup: BeautifulSoup) -> str:
    """First <h1>, else <title>, else ``"unnamed"``."""
    for name in ("h1", "title"):
        tag = soup.find(name)
        if isinstance(tag, Tag):
            return " ".join(tag.get_text().split())
    return "unnamed"


def extract_links(soup: BeautifulSoup, page_url: str) -> List[str]:
    """Absolute URLs of every ``a[href]`` on the page that stay on its host."""
    host = urlsplit(page_url).hostname
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        href = tag.get("href")
        if not isinstance(href, str):
            continue
        try:
            absolute = urljoin(page_url, href.strip())
            if not is_absolute_url(absolute):
                continue
            if same_host(absolute, host):
                links.append(absolute)
        except ValueError:
            continue
    return links


class Spider:
    """Single fetch attempt per call, no retries."""

    def __init__(self, session: ClientSession, user_agent: str = USER_AGENT_NAME) -> None:
        self.session = session
        self.user_agent = user_agent

    async def start(self, url: str) -> PageResult:
        """Fetch *url* and parse it into a PageResult.

        Raises FetchError on network failures and non-2xx responses, and
        NotHtmlError when the body is neither labelled nor shaped as HTML.
        """
        html = await self._fetch_html(url)
        soup = BeautifulSoup(html, "html.parser")
        return PageResult(
            url=url,
            found_urls=extract_links(soup, url),
            title=extract_title(soup),
            html=html,
        )

    async def _fetch_html(self, url: str) -> str:
        try:
            async with self.session.get(url, headers={"User-Agent": self.user_agent}) as resp:
                if not 200 <= resp.status < 300:
                    raise FetchError(url, f"HTTP {resp.status}", status=resp.status)
                content_type = resp.headers.get("Content-Type")
                html = await resp.text(errors="replace")
        except (ClientError, asyncio.TimeoutError) as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc

        if content_type != EXPECTED_CONTENT_TYPE and not sniff_html(html):
            raise NotHtmlError(url)
        return html
