from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path
from typing import Optional

from .builder import build_site
from .config import BuildOptions, load_config
from .eject import eject_layout
from .locator import BUILTIN_LAYOUTS
from .utils import is_empty_dir, parse_bool, parse_int


def parse_tags(values: list[str]) -> tuple[tuple[str, str], ...]:
    tags = []
    for value in values:
        key, _, expected = value.partition(":")
        key = key.strip()
        if key:
            tags.append((key, expected.strip()))
    return tuple(tags)


def confirm_output(output_dir: Path, force: bool) -> bool:
    if force or is_empty_dir(output_dir):
        return True
    answer = input(f"Output directory {output_dir} is not empty. Continue? (y/n) ")
    return answer.strip().lower() == "y"


def eject_main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(prog="wikisite eject", description="Copy a built-in layout to ./layout.html.")
    parser.add_argument("layout", nargs="?", default="default", help="Built-in layout to eject.")
    parser.add_argument("--force", action="store_true", help="Overwrite layout.html without asking.")
    args = parser.parse_args(argv)
    if args.layout not in BUILTIN_LAYOUTS:
        print(f'Error: Layout "{args.layout}" not found.', file=sys.stderr)
        return 1
    eject_layout(args.layout, force=args.force)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] == "eject":
        return eject_main(argv[1:])

    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument(
        "--config",
        default="wikisite.toml",
        help="Path to config file (TOML/YAML/JSON).",
    )
    pre_args, _ = pre_parser.parse_known_args(argv)
    config = load_config(Path(pre_args.config))

    def cfg_value(key: str, default: object) -> object:
        value = config.get(key)
        return default if value is None else value

    def cfg_str(key: str, default: str) -> str:
        return str(cfg_value(key, default))

    def cfg_bool(key: str, default: bool) -> bool:
        return parse_bool(cfg_value(key, default))

    def cfg_int(key: str, default: int) -> int:
        return parse_int(cfg_value(key, default), default)

    def cfg_list(key: str) -> list[str]:
        value = cfg_value(key, [])
        if isinstance(value, str):
            return [value]
        return [str(item) for item in value]

    parser = argparse.ArgumentParser(prog="wikisite", description="Build a static site from a folder of Markdown notes.")
    parser.add_argument("--config", default=pre_args.config, help="Path to config file (TOML/YAML/JSON).")
    parser.add_argument("input", nargs="?", default=cfg_str("input", "./docs"), help="Markdown file or directory.")
    parser.add_argument("-o", "--output", default=cfg_str("output", "./dist"), help="Output directory.")
    parser.add_argument(
        "-t",
        "--tags",
        action="append",
        default=None,
        metavar="KEY:VALUE",
        help="Only build pages whose front matter matches, e.g. publish:true. Repeatable.",
    )
    parser.add_argument(
        "--base-url",
        default=cfg_str("base_url", os.environ.get("BASE_URL", "")),
        help="Public site URL used for the sitemap, og:url and asset URLs.",
    )
    parser.add_argument(
        "--layout",
        choices=BUILTIN_LAYOUTS,
        default=cfg_str("layout", "default"),
        help="Built-in layout used when no layout.html is found.",
    )
    parser.add_argument(
        "--clean-link",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("clean_link", False),
        help="Drop the .html suffix from page links.",
    )
    parser.add_argument(
        "--sitemap",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("sitemap", True),
        help="Generate sitemap.xml when a base URL is set.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=cfg_int("workers", 0),
        help="Number of worker threads for parsing (0 = auto).",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        default=cfg_bool("force", False),
        help="Build into a non-empty output directory without asking.",
    )
    args = parser.parse_args(argv)

    output_dir = Path(args.output)
    if not confirm_output(output_dir, args.force):
        print("Build cancelled.")
        return 0

    options = BuildOptions(
        tags=parse_tags(args.tags if args.tags is not None else cfg_list("tags")),
        base_url=args.base_url.strip(),
        layout=args.layout,
        clean_link=args.clean_link,
        sitemap=args.sitemap,
        workers=args.workers,
    )
    print(f"Matching .md files from: {args.input}")
    if options.tags:
        print(f"Filtering by tags: {', '.join(f'{k}:{v}' for k, v in options.tags)}")
    start = time.perf_counter()
    built = build_site(Path(args.input), output_dir, options)
    elapsed = time.perf_counter() - start
    if not built:
        return 1
    print(f"Build completed in {elapsed:.2f}s.")
    print(f"Site generated in: {output_dir}")
    return 0
