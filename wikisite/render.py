from __future__ import annotations

import html
import re
from functools import lru_cache
from pathlib import Path

from pygments.formatters import HtmlFormatter

from .locator import DEFAULT_LAYOUT, find_layout
from .utils import stringify_value, write_text

PLACEHOLDER_RE = re.compile(r"\{\{\s*[\w.-]+\s*\}\}")
LATE_KEYS = ("meta_tags", "highlight_css", "content")


def render_template(template: str, **context: str) -> str:
    output = template
    for key, value in context.items():
        if key in LATE_KEYS:
            continue
        output = output.replace(f"{{{{{key}}}}}", value)
    output = PLACEHOLDER_RE.sub(
        lambda m: m.group(0) if m.group(0)[2:-2].strip() in LATE_KEYS else "", output
    )
    for key in LATE_KEYS:
        output = output.replace(f"{{{{{key}}}}}", context.get(key, ""))
    return output


def read_template(path: Path) -> str:
    return path.read_text(encoding="utf-8")


@lru_cache(maxsize=None)
def highlight_css() -> str:
    return HtmlFormatter().get_style_defs(".codehilite")


def build_meta_tags(title: str, description: str, favicon: str, og_image: str, og_url: str) -> str:
    tags = []
    if favicon:
        tags.append(f'<link rel="icon" href="{html.escape(favicon)}">')
    tags.append(f'<meta property="og:title" content="{html.escape(title)}">')
    tags.append(f'<meta property="og:description" content="{html.escape(description)}">')
    if og_image:
        tags.append(f'<meta property="og:image" content="{html.escape(og_image)}">')
    if og_url:
        tags.append(f'<meta property="og:url" content="{html.escape(og_url)}">')
    return "\n".join(tags)


def page_context(page) -> dict:
    front_matter = page.front_matter or page.page_front_matter or {}
    favicon = page.favicon or stringify_value(front_matter.get("favicon"))
    og_image = page.og_image or stringify_value(front_matter.get("ogImage"))
    og_url = page.og_url or stringify_value(front_matter.get("ogUrl"))
    context = {
        key: html.escape(stringify_value(value))
        for key, value in front_matter.items()
        if isinstance(key, str) and not isinstance(value, (dict, list))
    }
    context.update(
        title=html.escape(page.title),
        description=html.escape(page.description),
        favicon=html.escape(favicon),
        og_image=html.escape(og_image),
        og_url=html.escape(og_url),
        content=page.content,
        meta_tags=build_meta_tags(page.title, page.description, favicon, og_image, og_url),
        highlight_css=highlight_css(),
    )
    return context


def render_page(page, layout: str = DEFAULT_LAYOUT) -> str:
    layout_path = find_layout(page.input_file, page.input_folder, layout)
    rendered = render_template(read_template(layout_path), **page_context(page))
    write_text(Path(page.output_file_path), rendered)
    print(f"Rendered: {page.output_file_path}")
    return rendered
