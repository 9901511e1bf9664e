# File: doccrawl/report.py
"""doccrawl.report: JSON and HTML (Jinja2) summaries of a finished crawl."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from doccrawl.crawler.models import PageResult

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "report.html.j2"


def _page_rows(pages: Sequence[PageResult]) -> List[Dict[str, Any]]:
    return [{"url": p.url, "title": p.title, "links": list(p.found_urls)} for p in pages]


def render_json(pages: Sequence[PageResult], output_path: Union[Path, str]) -> Path:
    """
    Save the crawled pages (without their HTML) as a JSON list.

    :param pages: PageResult objects in crawl order
    :param output_path: path of the JSON file
    :return: Path of the saved file
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as f:
        json.dump(_page_rows(pages), f, ensure_ascii=False, indent=2)
    return output


def render_html(
    pages: Sequence[PageResult],
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
    *,
    start_url: str = "",
) -> Path:
    """Render the crawl report template and save it.

    Args:
        pages: PageResult objects in crawl order.
        template_dir: directory holding ``report.html.j2``; None uses the bundled one.
        output_path: path of the resulting HTML file.

    Returns:
        Path of the saved HTML file.
    """
    template_dir = Path(template_dir) if template_dir is not None else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)
    html_content = template.render(start_url=start_url, pages=_page_rows(pages))
    output_path.write_text(html_content, encoding="utf-8")
    return output_path


__all__ = ["render_json", "render_html", "DEFAULT_TEMPLATE_DIR"]
