from __future__ import annotations

import os
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from .assets import resolve_page_assets
from .config import BuildOptions, load_site_front_matter
from .parser import PageAttributes, parse_markdown
from .render import render_page
from .sitemap import render_sitemap, write_robots
from .utils import stringify_value

MAX_WORKERS = 32


def collect_inputs(input_arg: Path) -> tuple[Path, list[Path]]:
    """Return the input root and the Markdown files to build.

    Raises ``FileNotFoundError`` when ``input_arg`` does not exist.
    """
    if input_arg.is_file():
        return input_arg.parent, [input_arg]
    if not input_arg.is_dir():
        raise FileNotFoundError(f"Input not found: {input_arg}")
    files = sorted((path for path in input_arg.rglob("*.md") if path.is_file()), key=lambda p: p.as_posix())
    return input_arg, files


def worker_count(options: BuildOptions, jobs: int) -> int:
    workers = options.workers if options.workers > 0 else (os.cpu_count() or 1)
    return max(1, min(workers, MAX_WORKERS, jobs or 1))


def merge_front_matter(pages: list[PageAttributes], site_front_matter: dict) -> None:
    site_description = stringify_value(site_front_matter.get("description"))
    for page in pages:
        page.front_matter = {**site_front_matter, **page.page_front_matter}
        if site_description and not page.page_front_matter.get("description"):
            page.description = site_description


def report_duplicate_outputs(pages: list[PageAttributes]) -> None:
    seen: dict[str, Path] = {}
    for page in pages:
        key = os.path.normcase(os.path.abspath(page.output_file_path))
        if key in seen:
            print(
                f"Duplicate output path {page.output_file_path}: {seen[key]} and {page.input_file}",
                file=sys.stderr,
            )
        else:
            seen[key] = page.input_file


def build_site(input_arg, output_root, options: Optional[BuildOptions] = None) -> bool:
    options = options or BuildOptions()
    input_arg = Path(input_arg)
    output_root = Path(output_root)
    parser = options.parser or parse_markdown
    renderer = options.render_page or render_page
    sitemap_renderer = options.render_sitemap or render_sitemap

    try:
        output_root.mkdir(parents=True, exist_ok=True)
        input_root, files = collect_inputs(input_arg)
    except OSError as exc:
        print(f"Build failed: {exc}", file=sys.stderr)
        return False

    site_front_matter = load_site_front_matter(input_root)

    def parse_one(path: Path) -> Optional[PageAttributes]:
        try:
            return parser(path, input_root, output_root, options)
        except Exception as exc:
            print(f"Error parsing file {path}: {exc}", file=sys.stderr)
            return None

    workers = worker_count(options, len(files))
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            parsed = list(executor.map(parse_one, files))
    else:
        parsed = [parse_one(path) for path in files]
    pages = [page for page in parsed if page is not None]

    merge_front_matter(pages, site_front_matter)
    report_duplicate_outputs(pages)
    resolve_page_assets(pages, input_root, output_root, site_front_matter, options.base_url)

    if options.base_url and options.sitemap:
        sitemap_renderer(pages, output_root / "sitemap.xml", options.base_url)
    write_robots(output_root)

    for page in pages:
        renderer(page, options.layout)
    return True
