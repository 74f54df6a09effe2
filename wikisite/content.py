from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Iterable
from urllib.parse import unquote

import yaml

from .locator import locate_asset
from .utils import encode_path, stringify_value

LIST_MARKER_RE = re.compile(r"^(?P<indent>[ \t]*)(?:[-+*]|\d+[.)])\s+")
FENCE_RE = re.compile(r"^(?P<indent>[ \t]*)(`{3,}|~{3,})")
EMBED_RE = re.compile(r"!\[\[(?P<target>[^\]|]+)(?:\|(?P<alt>[^\]]*))?\]\]")
CODE_SPAN_RE = re.compile(r"(`+).+?\1")
FRONT_MATTER_CLOSE = {"---", "..."}


def parse_front_matter(text: str) -> tuple[dict, str]:
    """Split a leading ``---`` YAML block from the document body.

    Raises ``yaml.YAMLError`` when the block is not valid YAML.
    """
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, clean_text

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() in FRONT_MATTER_CLOSE:
            end = i
            break
    if end is None:
        return {}, clean_text

    meta = yaml.safe_load("\n".join(lines[1:end]))
    if not isinstance(meta, dict):
        meta = {}
    body = "\n".join(lines[end + 1 :])
    return meta, body


def matches_tags(front_matter: dict, tags: Iterable[tuple[str, str]]) -> bool:
    for key, expected in tags:
        actual = stringify_value(front_matter.get(key))
        if expected == "true" and actual != "true":
            return False
        if expected == "false" and actual == "true":
            return False
        # Any other expected value is accepted as is.
    return True


def iter_lines_outside_fences(lines: list[str]):
    in_fence = False
    fence_marker = ""
    for line in lines:
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(2)
            if not in_fence:
                in_fence = True
                fence_marker = marker
            elif marker == fence_marker:
                in_fence = False
                fence_marker = ""
            yield line, True
            continue
        yield line, in_fence


def sub_outside_code_spans(pattern: re.Pattern, repl, line: str) -> str:
    out: list[str] = []
    pos = 0
    for span in CODE_SPAN_RE.finditer(line):
        out.append(pattern.sub(repl, line[pos : span.start()]))
        out.append(span.group(0))
        pos = span.end()
    out.append(pattern.sub(repl, line[pos:]))
    return "".join(out)


def preprocess_embeds(text: str, document_dir: Path) -> tuple[str, list[str]]:
    """Rewrite ``![[reference]]`` embeds into standard Markdown images.

    References are looked up below ``document_dir``. Unresolved ones keep
    their decoded text, produce one diagnostic, and are returned so later
    stages do not report them again.
    """
    missing: list[str] = []

    def repl(match: re.Match) -> str:
        reference = unquote(match.group("target").strip())
        alt = (match.group("alt") or "").strip()
        resolved = locate_asset(reference, document_dir)
        if resolved is None:
            print(f"Embedded file not found: {reference}", file=sys.stderr)
            missing.append(reference)
            resolved = reference
        return f"![{alt}](./{encode_path(resolved)})"

    out: list[str] = []
    for line, skip in iter_lines_outside_fences(text.splitlines()):
        out.append(line if skip else sub_outside_code_spans(EMBED_RE, repl, line))
    return "\n".join(out), missing


def normalize_list_spacing(text: str) -> str:
    lines = text.splitlines()
    out: list[str] = []
    for line, skip in iter_lines_outside_fences(lines):
        if not skip:
            list_match = LIST_MARKER_RE.match(line)
            if list_match and not list_match.group("indent"):
                if out and out[-1].strip() and not LIST_MARKER_RE.match(out[-1]):
                    out.append("")
        out.append(line)
    return "\n".join(out)
