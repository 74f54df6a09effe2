from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

try:
    import tomllib as toml
except ImportError:
    import tomli as toml

import yaml

SITE_CONFIG_NAMES = ("site.yaml", "site.yml", "site.toml", "site.json")


@dataclass(frozen=True)
class BuildOptions:
    """Settings for one build, fixed before any document is parsed.

    ``parser``, ``render_page`` and ``render_sitemap`` replace the built-in
    implementations when set.
    """

    tags: tuple = ()
    base_url: str = ""
    layout: str = "default"
    clean_link: bool = False
    sitemap: bool = True
    workers: int = 0
    parser: Optional[Callable] = None
    render_page: Optional[Callable] = None
    render_sitemap: Optional[Callable] = None


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        try:
            data = toml.loads(text)
        except toml.TOMLDecodeError as exc:
            print(f"Invalid TOML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        return data
    if suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            print(f"Invalid YAML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        if data is None:
            return {}
        if not isinstance(data, dict):
            print(f"YAML config must be a mapping: {path}", file=sys.stderr)
            sys.exit(1)
        return data
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        print(f"Invalid JSON in config file {path}: {exc}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(data, dict):
        print(f"JSON config must be a mapping: {path}", file=sys.stderr)
        sys.exit(1)
    return data


def load_site_front_matter(input_root: Path) -> dict:
    for name in SITE_CONFIG_NAMES:
        path = input_root / name
        if path.is_file():
            front_matter = load_config(path).get("front_matter")
            return front_matter if isinstance(front_matter, dict) else {}
    return {}
