"""Directory tree enumeration shared by the command builder and tree helpers."""

from __future__ import annotations

import os
from pathlib import Path


def walk_tree(root: Path) -> list[Path]:
    """Return *root* followed by every entry below it, sorted by path.

    A root that does not exist or is a plain file yields only itself.
    Symlinked directories are listed but not descended into.
    """
    entries: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        parent = Path(dirpath)
        entries.extend(parent / name for name in dirnames)
        entries.extend(parent / name for name in filenames)
    return [root, *sorted(entries)]
