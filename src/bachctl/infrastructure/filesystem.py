"""Directory tree helpers: walk, copy, and delete.

Precondition checks and exit codes live in the tree actions
(:mod:`bachctl.services.actions`); these functions only do the I/O and
raise :class:`OSError` on failure.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable, Iterator
from pathlib import Path

from bachctl.domain.paths import walk_tree

logger = logging.getLogger(__name__)

PathFilter = Callable[[Path], bool]


def accept_all(_path: Path) -> bool:
    """Path filter selecting everything."""
    return True


def tree_lines(root: Path) -> Iterator[str]:
    """Yield *root* itself, then ``.`` and ``./<relative>`` for every entry.

    Raises:
        FileNotFoundError: *root* does not exist.
    """
    if not root.exists():
        msg = f"dumpTree failed: path '{root}' does not exist"
        raise FileNotFoundError(msg)
    yield str(root)
    for path in walk_tree(root):
        relative = path.relative_to(root)
        yield "." if relative == Path() else f".{os.sep}{relative}"


def copy_tree(source: Path, target: Path, predicate: PathFilter = accept_all) -> int:
    """Copy files below *source* accepted by *predicate* into *target*.

    Directories are always recreated; existing files are replaced.
    Returns the number of files copied.
    """
    entries = walk_tree(source)
    copied = 0
    for path in entries:
        destination = target / path.relative_to(source)
        if path.is_dir():
            destination.mkdir(parents=True, exist_ok=True)
            continue
        if predicate(path):
            shutil.copy(path, destination)
            copied += 1
    logger.debug("Copied %d file(s) of %d elements.", copied, len(entries))
    return copied


def delete_tree(root: Path, predicate: PathFilter = accept_all) -> None:
    """Delete entries below *root* accepted by *predicate*, deepest first.

    A single file or an empty directory is removed right away.  A missing
    root is a no-op.
    """
    if not root.exists() and not root.is_symlink():
        return
    if root.is_file() or root.is_symlink():
        root.unlink()
        return
    if not any(root.iterdir()):
        root.rmdir()
        return
    for path in sorted((p for p in walk_tree(root) if predicate(p)), reverse=True):
        if path.is_dir() and not path.is_symlink():
            path.rmdir()
        elif path.exists() or path.is_symlink():
            path.unlink()
