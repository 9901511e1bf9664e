# File: tests/test_cli.py
"""CLI tests with click.testing.CliRunner.
Cover `crawl`, `robots`, `config`, `--version` and error handling.
"""
import asyncio
import json

import pytest
from click.testing import CliRunner

import doccrawl.cli as cli_module
from doccrawl.cli import cli
from doccrawl.crawler import Message, PageResult, Result, RobotsTxt
from doccrawl.crawler.models import Disallow

PAGES = [
    PageResult(url="https://docs.example.com/", found_urls=["https://docs.example.com/a"], title="Home", html="<html>1</html>"),
    PageResult(url="https://docs.example.com/a", found_urls=[], title="A & B", html="<html>2</html>"),
]


@pytest.fixture()
def crawled(monkeypatch):
    """Replace run_crawl with a canned event stream; records the crawler it got."""
    seen = {}

    async def fake_run_crawl(crawler, on_event):
        seen["crawler"] = crawler
        for page in PAGES:
            on_event(Message(f"Visiting {page.url}"))
            on_event(Result(page))
        return list(PAGES)

    monkeypatch.setattr(cli_module, "run_crawl", fake_run_crawl)
    return seen


def event_lines(output: str):
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "doccrawl" in result.output


def test_show_config(tmp_path):
    cfg_file = tmp_path / "crawler.json"
    cfg_file.write_text(json.dumps({"user_agent": "DocsBot/1.0", "max_depth": 2}), encoding="utf-8")

    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["user_agent"] == "DocsBot/1.0"
    assert data["max_depth"] == 2


def test_bad_config_exits(tmp_path):
    cfg_file = tmp_path / "crawler.yaml"
    cfg_file.write_text("max_depth: -5\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1


def test_crawl_streams_events(crawled, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["crawl", "https://docs.example.com/", "--max-depth", "2", "--delay", "0"])
    assert result.exit_code == 0
    events = event_lines(result.output)
    assert [e["kind"] for e in events] == ["message", "result", "message", "result"]
    assert events[1] == {"kind": "result", "url": "https://docs.example.com/", "title": "Home"}

    crawler = crawled["crawler"]
    assert crawler.max_depth == 2
    assert crawler.default_delay == 0


def test_crawl_with_html(crawled, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["crawl", "https://docs.example.com/", "--with-html"])
    assert result.exit_code == 0
    assert event_lines(result.output)[1]["html"] == "<html>1</html>"
    assert crawled["crawler"].max_depth is None


def test_crawl_writes_reports(crawled, tmp_path):
    out_json = tmp_path / "out" / "pages.json"
    out_html = tmp_path / "out" / "report.html"
    result = CliRunner().invoke(
        cli,
        ["crawl", "https://docs.example.com/", "--json", str(out_json), "--html", str(out_html)],
    )
    assert result.exit_code == 0
    data = json.loads(out_json.read_text(encoding="utf-8"))
    assert data[0] == {"url": "https://docs.example.com/", "title": "Home", "links": ["https://docs.example.com/a"]}
    html = out_html.read_text(encoding="utf-8")
    assert "A &amp; B" in html
    assert "2 page(s) crawled." in html


def test_crawl_invalid_url(crawled):
    result = CliRunner().invoke(cli, ["crawl", "docs.example.com"])
    assert result.exit_code == 1
    assert "crawler" not in crawled


def test_crawl_timeout(monkeypatch):
    async def slow(crawler, on_event):
        await asyncio.sleep(2)
        return []

    monkeypatch.setattr(cli_module, "run_crawl", slow)
    result = CliRunner().invoke(cli, ["crawl", "https://docs.example.com/", "--crawl-timeout", "0.2"])
    assert result.exit_code == 1
    assert "did not finish" in result.output


def test_robots_command(monkeypatch):
    async def fake_load_robots(url, config):
        return RobotsTxt([Disallow("/private")])

    monkeypatch.setattr(cli_module, "load_robots", fake_load_robots)
    runner = CliRunner()

    denied = runner.invoke(cli, ["robots", "https://docs.example.com/private/x"])
    assert denied.exit_code == 0
    assert json.loads(denied.output) == {
        "url": "https://docs.example.com/private/x",
        "user_agent": "MagicDocsBot",
        "allowed": False,
        "crawl_delay": None,
    }

    allowed = runner.invoke(cli, ["robots", "https://docs.example.com/public"])
    assert json.loads(allowed.output)["allowed"] is True


def test_robots_command_rejects_relative_url():
    result = CliRunner().invoke(cli, ["robots", "/private"])
    assert result.exit_code == 1
