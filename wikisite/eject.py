from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import Optional

from .locator import BUILTIN_LAYOUTS, LAYOUT_FILE_NAME, builtin_layout


def eject_layout(layout: str, target_dir: Optional[Path] = None, force: bool = False) -> bool:
    """Copy a built-in layout to ``layout.html`` so it can be customised.

    Asks before overwriting an existing file unless ``force`` is set.
    """
    if layout not in BUILTIN_LAYOUTS:
        print(f'Error: Layout "{layout}" not found.', file=sys.stderr)
        return False
    target = Path(target_dir or Path.cwd()) / LAYOUT_FILE_NAME
    if target.exists() and not force:
        print(f"Warning: {LAYOUT_FILE_NAME} already exists in {target.parent}.")
        answer = input("Do you want to overwrite it? (y/n) ").strip().lower()
        if answer != "y":
            print("Ejection cancelled.")
            return False
    shutil.copyfile(builtin_layout(layout), target)
    print(f'Ejected "{layout}" layout to {target}')
    return True
