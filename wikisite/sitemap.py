from __future__ import annotations

import html
import os
from pathlib import Path

from .utils import to_posix, write_text

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
ROBOTS_TXT = "User-agent: *\nDisallow:"


def page_path(output_file_path: Path, sitemap_dir: Path) -> str:
    relative = to_posix(os.path.relpath(output_file_path, sitemap_dir))
    if relative == "index.html" or relative.endswith("/index.html"):
        relative = relative[: -len("index.html")]
    elif relative.endswith(".html"):
        relative = relative[: -len(".html")]
    if not relative.startswith("/"):
        relative = f"/{relative}"
    return relative


def render_sitemap(pages: list, sitemap_path: Path, base_url: str) -> str:
    sitemap_path = Path(sitemap_path)
    base = base_url.rstrip("/")
    items = []
    for page in pages:
        url = base + page_path(page.output_file_path, sitemap_path.parent)
        items.append(f"<url><loc>{html.escape(url, quote=False)}</loc></url>")
    sitemap = "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<urlset xmlns="{SITEMAP_NAMESPACE}">',
            "\n".join(items),
            "</urlset>",
        ]
    )
    write_text(sitemap_path, sitemap)
    print(f"Rendered sitemap: {sitemap_path}")
    return sitemap


def write_robots(output_root: Path) -> bool:
    robots_path = output_root / "robots.txt"
    if robots_path.exists():
        return False
    write_text(robots_path, ROBOTS_TXT)
    return True
