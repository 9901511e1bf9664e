# File: tests/conftest.py
from __future__ import annotations

from collections import Counter
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

import pytest
import pytest_asyncio
from aiohttp import web

#: body, content type
Route = Tuple[str, str]


@dataclass
class MockSite:
    """A live aiohttp server answering GET requests from a path -> response table."""

    base_url: str
    routes: Dict[str, Union[Route, int]]
    hits: Counter = field(default_factory=Counter)
    user_agents: List[Optional[str]] = field(default_factory=list)

    def url(self, path: str = "") -> str:
        return f"{self.base_url}{path}"


def html_page(body: str) -> Route:
    """Page in the shape the crawler tests use: sniffed, not labelled, as HTML."""
    return f"<html><body>{body}</body></html>", "text/html; charset=utf-8"


def _build_app(site: MockSite) -> web.Application:
    async def handle(request: web.Request) -> web.Response:
        site.hits[request.path] += 1
        site.user_agents.append(request.headers.get("User-Agent"))
        route = site.routes.get(request.path)
        if route is None:
            return web.Response(status=404, text="not found")
        if isinstance(route, int):
            return web.Response(status=route)
        body, content_type = route
        return web.Response(body=body.encode("utf-8"), headers={"Content-Type": content_type})

    app = web.Application()
    app.router.add_get("/{tail:.*}", handle)
    return app


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def serve_site(unused_tcp_port_factory) -> AsyncIterator[Callable[..., Awaitable[MockSite]]]:
    """Factory fixture: ``site = await serve_site({"/": html_page(...)})``."""
    cleanups = []

    async def _start(routes: Dict[str, Union[Route, int]], robots: Optional[str] = None) -> MockSite:
        routes = dict(routes)
        if robots is not None:
            routes["/robots.txt"] = (robots, "text/plain")
        port = unused_tcp_port_factory()
        site = MockSite(base_url=f"http://localhost:{port}", routes=routes)
        server = _serve_app(_build_app(site), port)
        await server.__anext__()
        cleanups.append(server)
        return site

    yield _start

    for server in cleanups:
        await server.aclose()


@pytest.fixture()
def chain_pages() -> Dict[str, Route]:
    """``/ -> /one -> /two``, the chain most crawler tests start from."""
    return {
        "/": html_page("<a href='/one'>One</a>"),
        "/one": html_page("<a href='/two'>Two</a>"),
    }
