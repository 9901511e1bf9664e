# doccrawl/crawler/models.py
"""
Data models for the doccrawl crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Union


@dataclass(slots=True)
class PageResult:
    """One fetched page: its URL, same-origin outbound links, title and raw HTML."""

    url: str
    found_urls: List[str] = field(default_factory=list)
    title: str = "unnamed"
    html: str = ""


@dataclass(frozen=True, slots=True)
class Message:
    """Human-readable progress line."""

    kind: ClassVar[str] = "message"
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "text": self.text}


@dataclass(frozen=True, slots=True)
class Result:
    """A successfully processed page."""

    kind: ClassVar[str] = "result"
    page: PageResult

    def to_dict(self, *, include_html: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind, "url": self.page.url, "title": self.page.title}
        if include_html:
            data["html"] = self.page.html
        return data


StreamEvent = Union[Message, Result]


# robots.txt rules ----------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Allow:
    pattern: str


@dataclass(frozen=True, slots=True)
class Disallow:
    pattern: str


@dataclass(frozen=True, slots=True)
class CrawlDelay:
    seconds: float


Rule = Union[Allow, Disallow, CrawlDelay]

__all__ = [
    "Allow",
    "CrawlDelay",
    "Disallow",
    "Message",
    "PageResult",
    "Result",
    "Rule",
    "StreamEvent",
]
