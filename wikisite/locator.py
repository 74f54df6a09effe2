from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import Iterable, Optional

from .utils import relative_posix

STATIC_DIR = Path(__file__).resolve().parent / "static"
LAYOUT_FILE_NAME = "layout.html"
DEFAULT_LAYOUT = "default"
BUILTIN_LAYOUTS = ("default", "matrix", "cyberpunk")
DEFAULT_SKIP_DIRS = frozenset({".git", ".hg", ".svn", "node_modules", "__pycache__", ".venv"})


def locate_asset(
    reference: str,
    search_root: Path,
    initial_dir: Optional[Path] = None,
    skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS,
) -> Optional[str]:
    """Find ``reference`` under ``search_root`` and return it relative to ``initial_dir``.

    A reference containing a path separator is taken as relative to
    ``search_root`` and only checked in place. A bare file name is looked up in
    ``search_root`` first, then breadth-first through its subdirectories in
    lexicographic order, skipping directories named in ``skip_dirs``. Returns
    ``None`` when nothing matches.
    """
    search_root = Path(search_root)
    initial_dir = search_root if initial_dir is None else Path(initial_dir)
    skipped = set(skip_dirs)

    if "/" in reference or "\\" in reference:
        candidate = search_root / reference
        if candidate.is_file():
            return relative_posix(candidate, initial_dir)
        return None

    queue = deque([search_root])
    while queue:
        current = queue.popleft()
        candidate = current / reference
        if candidate.is_file():
            return relative_posix(candidate, initial_dir)
        try:
            children = sorted(
                (
                    child
                    for child in current.iterdir()
                    if child.is_dir() and not child.is_symlink() and child.name not in skipped
                ),
                key=lambda p: p.name,
            )
        except OSError:
            continue
        queue.extend(children)
    return None


def builtin_layout(layout: Optional[str]) -> Path:
    name = layout if layout in BUILTIN_LAYOUTS else DEFAULT_LAYOUT
    return STATIC_DIR / f"{name}_layout.html"


def find_layout(document: Path, input_root: Path, layout: Optional[str] = DEFAULT_LAYOUT) -> Path:
    """Return the nearest ``layout.html`` between the document and the input root.

    Falls back to the built-in layout named by ``layout``; unknown names give
    the default one.
    """
    root = Path(input_root).resolve()
    current = Path(document).resolve().parent
    while True:
        candidate = current / LAYOUT_FILE_NAME
        if candidate.is_file():
            return candidate
        if current == root or current.parent == current:
            break
        current = current.parent
    return builtin_layout(layout)
