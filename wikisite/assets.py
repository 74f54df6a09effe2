from __future__ import annotations

import html
import posixpath
import re
from pathlib import Path
from typing import Optional
from urllib.parse import unquote

from .locator import STATIC_DIR
from .parser import PageAttributes
from .utils import copy_file, encode_path, is_url, join_url, relative_posix, stringify_value

FAVICON_EXTENSIONS = ("ico", "png", "svg", "jpg", "jpeg", "webp", "gif")
BUILTIN_FAVICON = STATIC_DIR / "favicon.png"
BUILTIN_OG_IMAGE = STATIC_DIR / "og-image.png"
IMG_SRC_RE = re.compile(r'<img[^>]*?\ssrc="([^"]+)"', re.IGNORECASE)


def public_url(path: str, base_url: str = "") -> str:
    """Absolute URLs pass through; anything else becomes root-relative, under ``base_url`` if set."""
    if is_url(path):
        return path
    if path.startswith("./"):
        path = path[2:]
    path = "/" + path.lstrip("/")
    if base_url:
        return join_url(base_url, path)
    return path


def og_url(output_file_path: Path, output_root: Path, base_url: str) -> Optional[str]:
    if not base_url:
        return None
    relative = relative_posix(output_file_path, output_root)
    if relative.endswith(".html"):
        relative = relative[: -len(".html")]
    if relative == "index":
        relative = ""
    elif relative.endswith("/index"):
        relative = relative[: -len("index")]
    return join_url(base_url, relative)


def copy_into_output(source: Path, output_root: Path, relative: str) -> str:
    copy_file(source, output_root / relative)
    return encode_path(relative)


def copy_configured(configured: str, source_dir: Path, target_dir: Path, output_root: Path) -> str:
    """Copy a front-matter asset path from ``source_dir`` into ``target_dir``.

    URLs and root-relative paths are returned unchanged; anything else comes
    back relative to ``output_root``.
    """
    if is_url(configured) or configured.startswith("/"):
        return configured
    relative = posixpath.normpath(unquote(configured))
    target = target_dir / relative
    copy_file(source_dir / relative, target)
    return encode_path(relative_posix(target, output_root))


def find_site_favicon(input_root: Path) -> Optional[Path]:
    for folder in (input_root, input_root / "assets"):
        for ext in FAVICON_EXTENSIONS:
            candidate = folder / f"favicon.{ext}"
            if candidate.is_file():
                return candidate
    return None


def resolve_site_favicon(input_root: Path, output_root: Path, site_front_matter: dict) -> str:
    """Favicon path for pages without their own, copying a file at most once."""
    configured = stringify_value(site_front_matter.get("favicon"))
    if configured:
        return copy_configured(configured, input_root, output_root, output_root)
    found = find_site_favicon(input_root)
    if found is not None:
        return copy_into_output(found, output_root, relative_posix(found, input_root))
    return copy_into_output(BUILTIN_FAVICON, output_root, BUILTIN_FAVICON.name)


def resolve_site_og_image(input_root: Path, output_root: Path, site_front_matter: dict) -> str:
    configured = stringify_value(site_front_matter.get("ogImage"))
    if configured:
        return copy_configured(configured, input_root, output_root, output_root)
    return copy_into_output(BUILTIN_OG_IMAGE, output_root, BUILTIN_OG_IMAGE.name)


def first_content_image(page: PageAttributes, output_root: Path) -> Optional[str]:
    match = IMG_SRC_RE.search(page.content or "")
    if not match:
        return None
    src = html.unescape(match.group(1))
    if is_url(src) or src.startswith("/"):
        return src
    folder = relative_posix(page.output_file_folder, output_root)
    return posixpath.normpath(posixpath.join(folder, src))


def page_og_image(page: PageAttributes, output_root: Path) -> Optional[str]:
    """Social image chosen by the page itself: front matter first, then its first image."""
    configured = stringify_value(page.page_front_matter.get("ogImage"))
    if configured:
        return copy_configured(configured, Path(page.input_file).parent, page.output_file_folder, output_root)
    return first_content_image(page, output_root)


def page_favicon(page: PageAttributes, output_root: Path) -> Optional[str]:
    configured = stringify_value(page.page_front_matter.get("favicon"))
    if not configured:
        return None
    return copy_configured(configured, Path(page.input_file).parent, page.output_file_folder, output_root)


def resolve_page_assets(
    pages: list[PageAttributes],
    input_root: Path,
    output_root: Path,
    site_front_matter: dict,
    base_url: str = "",
) -> None:
    """Fill in ``favicon``, ``og_image`` and ``og_url`` on every page.

    Site-wide fallbacks are resolved once, before any page is touched, and
    only when some page needs them.
    """
    page_favicons = [page_favicon(page, output_root) for page in pages]
    favicon_fallback = None
    if any(favicon is None for favicon in page_favicons):
        favicon_fallback = resolve_site_favicon(input_root, output_root, site_front_matter)

    page_images = [page_og_image(page, output_root) for page in pages]
    og_fallback = None
    if any(image is None for image in page_images):
        og_fallback = resolve_site_og_image(input_root, output_root, site_front_matter)

    for page, favicon, image in zip(pages, page_favicons, page_images):
        page.favicon = public_url(favicon or favicon_fallback, base_url)
        page.og_image = public_url(image or og_fallback, base_url)
        page.og_url = og_url(page.output_file_path, output_root, base_url)
