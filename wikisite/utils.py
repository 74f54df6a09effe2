from __future__ import annotations

import os
import re
import shutil
import sys
from pathlib import Path
from urllib.parse import quote, urlsplit

WHITESPACE_RE = re.compile(r"(\s|%20)+")


def normalize_path(name: str) -> str:
    """Turn a page or directory name into a URL-safe slug.

    Runs of whitespace and literal ``%20`` collapse to a single hyphen and the
    result is lowercased. Path separators are left alone.
    """
    return WHITESPACE_RE.sub("-", name.strip()).lower()


def is_url(value: str) -> bool:
    if not value:
        return False
    try:
        return bool(urlsplit(value).scheme)
    except ValueError:
        return False


def encode_path(path: str) -> str:
    return "/".join(quote(segment) for segment in path.split("/"))


def to_posix(path: str | os.PathLike) -> str:
    return str(path).replace("\\", "/")


def relative_posix(path: Path, start: Path) -> str:
    return to_posix(os.path.relpath(path, start))


def parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    return False


def parse_int(value: object, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def stringify_value(value: object) -> str:
    # YAML booleans must compare as "true"/"false", not "True"/"False".
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def join_url(base: str, path: str) -> str:
    base = base.rstrip("/")
    path = path.lstrip("/")
    if not path:
        return base
    return f"{base}/{path}"


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def copy_file(source: Path, target: Path) -> bool:
    if not source.is_file():
        print(f"Asset not found: {source}", file=sys.stderr)
        return False
    try:
        if target.exists() and target.resolve() == source.resolve():
            return True
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)
    except OSError as exc:
        print(f"Error copying {source} to {target}: {exc}", file=sys.stderr)
        return False
    return True


def is_empty_dir(path: Path) -> bool:
    return not path.exists() or not any(path.iterdir())
