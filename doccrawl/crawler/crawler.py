# === FILE: doccrawl/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from contextlib import aclosing
from typing import AsyncIterator, FrozenSet, List, Optional, Set

from aiohttp import ClientSession, ClientTimeout

from doccrawl.config import DEFAULT_CRAWL_DELAY, DEFAULT_TIMEOUT, USER_AGENT_NAME, CrawlerConfig
from doccrawl.crawler.errors import InvalidStartUrl, SpiderError
from doccrawl.crawler.models import Message, Result, StreamEvent
from doccrawl.crawler.robots import RobotsTxt
from doccrawl.crawler.spider import Spider
from doccrawl.logger import logger
from doccrawl.utils import display_url, is_absolute_url, normalize_path, relative_depth

__all__ = ("Crawler",)


class Crawler:
    """Sequential crawler of the subtree below one start URL.

    ``start()`` yields a Message before each fetch and a Result for each
    page that was fetched and parsed. Pages are fetched one at a time,
    paced by robots.txt's Crawl-delay (or *default_delay*), and only paths
    strictly below the start path, at most *max_depth* segments deeper, are
    followed.
    """

    def __init__(
        self,
        start_url: str,
        max_depth: Optional[int] = None,
        *,
        user_agent: str = USER_AGENT_NAME,
        timeout: float = DEFAULT_TIMEOUT,
        default_delay: float = DEFAULT_CRAWL_DELAY,
        session: Optional[ClientSession] = None,
    ) -> None:
        if not is_absolute_url(start_url):
            raise InvalidStartUrl(start_url)
        if max_depth is not None and max_depth < 0:
            raise ValueError("max_depth must be >= 0")

        self.start_url = start_url
        self.max_depth = max_depth
        self.user_agent = user_agent
        self.timeout = timeout
        self.default_delay = default_delay
        self.session = session

        self._base_path = normalize_path(start_url)
        self._queue: List[str] = [start_url]
        self._pending: Set[str] = {self._base_path}
        self._visited: Set[str] = set()
        self._pages_crawled = 0
        self._started = False
        self._owns_session = False

    @classmethod
    def from_config(
        cls, start_url: str, config: CrawlerConfig, max_depth: Optional[int] = None
    ) -> Crawler:
        return cls(
            start_url,
            max_depth if max_depth is not None else config.max_depth,
            user_agent=config.user_agent,
            timeout=config.timeout,
            default_delay=config.default_delay,
        )

    async def __aenter__(self) -> Crawler:
        if self.session is None:
            self.session = self._new_session()
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()
        self._owns_session = False

    @property
    def visited(self) -> FrozenSet[str]:
        return frozenset(self._visited)

    @property
    def pages_crawled(self) -> int:
        return self._pages_crawled

    def start(self) -> AsyncIterator[StreamEvent]:
        """Return the event stream of this crawl; it can be consumed only once."""
        if self._started:
            raise RuntimeError("Crawler.start() may only be called once")
        self._started = True
        return self._run()

    async def _run(self) -> AsyncIterator[StreamEvent]:
        session = self.session
        own_session = session is None
        if session is None:
            session = self._new_session()
        try:
            async with aclosing(self._crawl(session)) as events:
                async for event in events:
                    yield event
        finally:
            if own_session:
                await session.close()

    async def _crawl(self, session: ClientSession) -> AsyncIterator[StreamEvent]:
        logger.info("Crawl started: %s (max depth %s)", self.start_url, self.max_depth)
        started_at = time.monotonic()
        robots = await RobotsTxt.from_url(self.start_url, session, self.user_agent)
        delay = robots.delay()
        if delay is None:
            delay = self.default_delay
        spider = Spider(session, self.user_agent)

        while self._queue:
            url = self._queue.pop()
            path = normalize_path(url)
            self._pending.discard(path)

            if not robots.is_allowed(url):
                logger.debug("Disallowed by robots.txt: %s", url)
                continue
            if path in self._visited:
                continue
            self._visited.add(path)

            yield Message(f"Visiting {display_url(url)}")

            try:
                page = await spider.start(url)
            except SpiderError as exc:
                logger.info("Skipping %s", exc)
                continue

            for link in page.found_urls:
                self._consider(link)

            self._pages_crawled += 1
            logger.debug("Crawled %s (%d links, queue %d)", url, len(page.found_urls), len(self._queue))
            yield Result(page)

            if not self._queue:
                break
            await asyncio.sleep(delay)

        duration = time.monotonic() - started_at
        logger.info("Crawl finished: %d pages in %.2f s", self._pages_crawled, duration)

    def _consider(self, link: str) -> None:
        path = normalize_path(link)
        if path in self._visited or path in self._pending:
            return
        depth = relative_depth(self._base_path, path)
        if depth > 0 and (self.max_depth is None or depth <= self.max_depth):
            self._queue.append(link)
            self._pending.add(path)
        else:
            self._visited.add(path)

    def _new_session(self) -> ClientSession:
        return ClientSession(
            timeout=ClientTimeout(total=self.timeout),
            headers={"User-Agent": self.user_agent},
            raise_for_status=False,
        )
