from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

import markdown

from .content import matches_tags, normalize_list_spacing, parse_front_matter, preprocess_embeds
from .extensions import SiteExtension
from .utils import copy_file, normalize_path, relative_posix, stringify_value


@dataclass
class PageAttributes:
    title: str
    description: str
    content: str
    page_front_matter: dict
    input_file: Path
    input_folder: Path
    output_file_folder: Path
    output_file_name: str
    output_file_path: Path
    front_matter: dict = field(default_factory=dict)
    favicon: Optional[str] = None
    og_image: Optional[str] = None
    og_url: Optional[str] = None


@dataclass(frozen=True)
class PendingCopy:
    source: Path
    target: Path


def output_location(input_file: Path, input_root: Path, output_root: Path) -> tuple[Path, str]:
    relative = Path(os.path.relpath(input_file, input_root))
    folder = output_root
    if relative.parent != Path("."):
        folder = output_root / normalize_path(relative.parent.as_posix())
    return folder, f"{normalize_path(relative.stem)}.html"


def build_markdown(relative_root: str = ".", clean_link: bool = False) -> tuple[markdown.Markdown, SiteExtension]:
    site_ext = SiteExtension(relative_root=relative_root, clean_link=clean_link)
    md = markdown.Markdown(
        extensions=["fenced_code", "tables", "sane_lists", "codehilite", "toc", site_ext],
        extension_configs={
            "codehilite": {"guess_lang": False},
            "toc": {"permalink": True},
        },
    )
    return md, site_ext


def run_copies(copies: Iterable[PendingCopy], reported: Iterable[Path] = ()) -> None:
    already_reported = {path.resolve() for path in reported}
    for copy in copies:
        if not copy.source.is_file() and copy.source.resolve() in already_reported:
            continue
        copy_file(copy.source, copy.target)


def convert_document(
    body: str,
    input_file: Path,
    input_root: Path,
    output_file_folder: Path,
    clean_link: bool = False,
) -> tuple[str, str]:
    """Render one document body and copy the local images it references.

    Returns the HTML and the inferred first-level heading (may be empty).
    """
    document_dir = input_file.parent
    body, missing = preprocess_embeds(body, document_dir)
    body = normalize_list_spacing(body)
    md, site_ext = build_markdown(relative_posix(input_root, document_dir), clean_link)
    html_content = md.convert(body)
    copies = [
        PendingCopy(document_dir / path, output_file_folder / path) for path in site_ext.pending_copies
    ]
    run_copies(copies, reported=[document_dir / path for path in missing])
    return html_content, site_ext.title


def parse_markdown(
    input_file: Path,
    input_root: Path,
    output_root: Path,
    options: object = None,
) -> Optional[PageAttributes]:
    """Convert one Markdown file into ``PageAttributes``.

    Returns ``None`` when the document is rejected by the tag filter or could
    not be read or converted; such failures never propagate.
    """
    input_file = Path(input_file)
    input_root = Path(input_root)
    output_root = Path(output_root)
    tags = getattr(options, "tags", ()) or ()
    clean_link = bool(getattr(options, "clean_link", False))

    output_file_folder, output_file_name = output_location(input_file, input_root, output_root)
    output_file_path = output_file_folder / output_file_name
    print(f"Converting: {input_file} -> {output_file_folder}")

    try:
        raw_text = input_file.read_text(encoding="utf-8")
        front_matter, body = parse_front_matter(raw_text)
        if tags and not matches_tags(front_matter, tags):
            print(f"Skipped: {input_file}")
            return None
        html_content, inferred_title = convert_document(
            body, input_file, input_root, output_file_folder, clean_link
        )
        output_file_folder.mkdir(parents=True, exist_ok=True)
    except Exception as exc:
        print(f"Error parsing file {input_file}: {exc}", file=sys.stderr)
        return None

    title = stringify_value(front_matter.get("title")) or inferred_title or normalize_path(input_file.stem)
    description = stringify_value(front_matter.get("description")) or f"A page about {title}"
    print(f"Parsed: {output_file_path}")
    return PageAttributes(
        title=title,
        description=description,
        content=html_content,
        page_front_matter=front_matter,
        input_file=input_file,
        input_folder=input_root,
        output_file_folder=output_file_folder,
        output_file_name=output_file_name,
        output_file_path=output_file_path,
    )
