# doccrawl/crawler/robots.py
"""
Parser and checker for robots.txt rules.

Only the wildcard group and the group of this crawler's own agent are kept.
Rules are evaluated in file order and the last matching one decides.
"""
from __future__ import annotations

import asyncio
import math
import re
from typing import Dict, Iterable, List, Optional, Tuple

from aiohttp import ClientError, ClientSession

from doccrawl.config import USER_AGENT_NAME
from doccrawl.crawler.models import Allow, CrawlDelay, Disallow, Rule
from doccrawl.logger import logger
from doccrawl.utils import robots_url, url_path

__all__ = ("RobotsTxt", "convert_pattern", "agent_token")


def convert_pattern(pattern: str) -> str:
    """Translate a robots.txt path pattern into a regular expression.

    ``*`` matches any run of characters and a trailing ``$`` anchors the end
    of the path. The result is anchored at the start.
    """
    esc = re.escape(pattern).replace(r"\*", ".*")
    if esc.endswith(r"\$"):
        esc = esc[:-2] + "$"
    return f"^{esc}"


def agent_token(user_agent: str) -> str:
    """Product token of a User-Agent string (``MagicDocsBot/1.0`` -> ``magicdocsbot``)."""
    return user_agent.split("/", 1)[0].strip().lower()


class RobotsTxt:
    """Allow/deny and crawl-delay answers for one origin."""

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self.rules: Tuple[Rule, ...] = tuple(rules)
        self._matchers: List[Tuple[bool, re.Pattern[str]]] = []
        for rule in self.rules:
            if isinstance(rule, CrawlDelay):
                continue
            try:
                regex = re.compile(convert_pattern(rule.pattern))
            except re.error as exc:
                logger.debug("Skipping robots.txt rule %r: %s", rule, exc)
                continue
            self._matchers.append((isinstance(rule, Allow), regex))
        self._delay: Optional[float] = next(
            (rule.seconds for rule in self.rules if isinstance(rule, CrawlDelay)), None
        )

    @classmethod
    async def from_url(
        cls,
        url: str,
        session: ClientSession,
        user_agent: str = USER_AGENT_NAME,
    ) -> RobotsTxt:
        """Fetch and parse the robots.txt of *url*'s origin.

        Any failure yields an empty policy: everything allowed, no delay.
        """
        body = await cls._fetch(robots_url(url), session, user_agent)
        return cls(cls.parse(body, user_agent))

    @staticmethod
    async def _fetch(location: str, session: ClientSession, user_agent: str) -> str:
        try:
            async with session.get(location, headers={"User-Agent": user_agent}) as resp:
                if not 200 <= resp.status < 300:
                    logger.debug("robots.txt %s -> HTTP %s", location, resp.status)
                    return ""
                return await resp.text(errors="replace")
        except (ClientError, asyncio.TimeoutError) as exc:
            logger.warning("Error loading robots.txt %s: %s", location, exc)
            return ""

    @staticmethod
    def parse(body: str, user_agent: str = USER_AGENT_NAME) -> List[Rule]:
        """Return the wildcard rules followed by the rules for *user_agent*."""
        groups: Dict[str, List[Rule]] = {}
        current_agents: List[str] = []
        collecting_agents = False

        for raw in body.splitlines():
            line = raw.split("#", 1)[0].strip()
            if not line:
                continue
            key, _, val = line.partition(":")
            key = key.strip().lower()
            tokens = val.split()
            value = tokens[0] if tokens else ""

            if key == "user-agent":
                if not collecting_agents:
                    current_agents = []
                if value:
                    current_agents.append(value.lower())
                collecting_agents = True
                continue

            collecting_agents = False
            rule: Optional[Rule] = None
            if key == "allow" and value:
                rule = Allow(value)
            elif key == "disallow" and value:
                rule = Disallow(value)
            elif key == "crawl-delay" and value:
                try:
                    seconds = float(value)
                except ValueError:
                    continue
                if math.isfinite(seconds) and seconds >= 0:
                    rule = CrawlDelay(seconds)

            if rule is not None:
                for agent in current_agents:
                    groups.setdefault(agent, []).append(rule)

        relevant = list(groups.get("*", []))
        own = agent_token(user_agent)
        if own != "*":
            relevant.extend(groups.get(own, []))
        return relevant

    def is_allowed(self, url: str) -> bool:
        """True unless the last rule matching the URL path is a Disallow."""
        path = url_path(url)
        allowed = True
        for is_allow, regex in self._matchers:
            if regex.match(path):
                allowed = is_allow
        return allowed

    def delay(self) -> Optional[float]:
        """First Crawl-delay (seconds) that applies to this crawler, if any."""
        return self._delay

    def __repr__(self) -> str:
        return f"RobotsTxt(rules={len(self.rules)}, delay={self._delay!r})"
