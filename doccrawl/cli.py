# === FILE: doccrawl/cli.py ===
"""
Command line entry point of doccrawl.

Commands:
  crawl URL   Crawl the subtree below URL, streaming one JSON event per line
  robots URL  Show whether robots.txt lets the crawler fetch URL
  config      Show the effective configuration

Global options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only when omitted)
  --log-format FORMAT Logging format string

Example:
  doccrawl --log-level INFO crawl https://docs.example.com/guide/ --max-depth 2 --json pages.json
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import Callable, List, NoReturn

import click
from aiohttp import ClientSession, ClientTimeout

from doccrawl import __version__
from doccrawl.config import CrawlerConfig, load_config
from doccrawl.crawler import Crawler, InvalidStartUrl, PageResult, Result, RobotsTxt, StreamEvent
from doccrawl.logger import DEFAULT_FORMAT, init_logging
from doccrawl.report import render_html, render_json
from doccrawl.utils import is_absolute_url

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str) -> NoReturn:
    click.secho(message, fg="red", err=True)
    sys.exit(1)


async def run_crawl(crawler: Crawler, on_event: Callable[[StreamEvent], None]) -> List[PageResult]:
    """Drain the crawler's event stream, passing every event to *on_event*."""
    pages: List[PageResult] = []
    async with crawler:
        async for event in crawler.start():
            on_event(event)
            if isinstance(event, Result):
                pages.append(event.page)
    return pages


async def load_robots(url: str, config: CrawlerConfig) -> RobotsTxt:
    async with ClientSession(timeout=ClientTimeout(total=config.timeout)) as session:
        return await RobotsTxt.from_url(url, session, config.user_agent)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "--version", "-v", message="doccrawl, version %(version)s")
@click.option(
    "--config", "-c", "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a YAML or JSON config file.",
)
@click.option(
    "--log-level", "log_level",
    default="WARNING", show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Logging level",
)
@click.option(
    "--log-file", "log_file",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Log file (stderr when omitted)",
)
@click.option(
    "--log-format", "log_format",
    default=DEFAULT_FORMAT,
    show_default=True,
    help="Logging format string",
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """doccrawl command group."""
    init_logging(level=log_level, log_file=log_file, log_format=log_format)
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f"Failed to load config: {e}")
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


@cli.command("crawl", context_settings=CONTEXT_SETTINGS)
@click.argument("url")
@click.option(
    "--max-depth", "-d", "max_depth",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum depth below URL (unbounded by default)",
)
@click.option(
    "--delay", "delay",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds between pages when robots.txt sets no Crawl-delay",
)
@click.option(
    "--json", "-j", "json_output",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Save a JSON report of the crawled pages",
)
@click.option(
    "--html", "html_output",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Save an HTML report of the crawled pages",
)
@click.option(
    "--template", "-t", "template_dir",
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory with a report.html.j2 template",
)
@click.option("--with-html", is_flag=True, help="Include page HTML in result events")
@click.option(
    "--crawl-timeout", "crawl_timeout",
    type=float,
    default=None,
    help="Timeout for the whole crawl (seconds)",
)
@click.pass_context
def crawl(ctx, url, max_depth, delay, json_output, html_output, template_dir, with_html, crawl_timeout):
    """Crawl URL and print one JSON event per line."""
    cfg = ctx.obj["config"]
    if delay is not None:
        cfg = cfg.model_copy(update={"default_delay": delay})
    try:
        crawler = Crawler.from_config(url, cfg, max_depth=max_depth)
    except InvalidStartUrl as e:
        print_error(str(e))

    def emit(event: StreamEvent) -> None:
        payload = event.to_dict(include_html=with_html) if isinstance(event, Result) else event.to_dict()
        click.echo(json.dumps(payload, ensure_ascii=False))

    try:
        if crawl_timeout:
            pages = asyncio.run(asyncio.wait_for(run_crawl(crawler, emit), timeout=crawl_timeout))
        else:
            pages = asyncio.run(run_crawl(crawler, emit))
    except asyncio.TimeoutError:
        print_error(f"Crawl did not finish within {crawl_timeout} seconds")
    except Exception as e:
        print_error(f"Crawl failed: {e}")

    if json_output:
        try:
            saved_json = render_json(pages, json_output)
            click.echo(f"JSON report: {saved_json}", err=True)
        except Exception as e:
            print_error(f"Failed to save JSON report: {e}")

    if html_output:
        try:
            saved_html = render_html(pages, template_dir, html_output, start_url=url)
            click.echo(f"HTML report: {saved_html}", err=True)
        except Exception as e:
            print_error(f"Failed to save HTML report: {e}")


@cli.command("robots", context_settings=CONTEXT_SETTINGS)
@click.argument("url")
@click.pass_context
def robots(ctx, url):
    """Check URL against its site's robots.txt."""
    cfg = ctx.obj["config"]
    if not is_absolute_url(url):
        print_error(f"Not an absolute http(s) URL: {url}")
    policy = asyncio.run(load_robots(url, cfg))
    click.echo(
        json.dumps(
            {
                "url": url,
                "user_agent": cfg.user_agent,
                "allowed": policy.is_allowed(url),
                "crawl_delay": policy.delay(),
            }
        )
    )


@cli.command("config", context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the current configuration as JSON."""
    cfg = ctx.obj["config"]
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
