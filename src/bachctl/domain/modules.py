"""Module descriptor parsing and external-module resolution.

A descriptor is a ``module-info.java`` compilation unit::

    module com.example.app {
      requires com.example.lib;
      requires transitive java.logging;
    }

Only names are extracted; exports, opens, uses and provides clauses are
ignored.  Pure functions apart from reading descriptor files.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from bachctl.domain.errors import DescriptorFormatError
from bachctl.domain.paths import walk_tree

DESCRIPTOR_FILENAME = "module-info.java"

_COMMENT_PATTERN = re.compile(r"//[^\n]*|/\*.*?\*/", re.DOTALL)
_MODULE_PATTERN = re.compile(r"\bmodule\s+([\w.]+)\s*\{(.*)\}", re.DOTALL)
_REQUIRES_PATTERN = re.compile(r"\brequires\s+([^;]+?)\s*;", re.DOTALL)


@dataclass(frozen=True)
class ModuleDescriptor:
    """Declared module name and the names it requires."""

    name: str
    requires: frozenset[str] = frozenset()


def parse_descriptor(text: str) -> ModuleDescriptor:
    """Parse descriptor source *text*.

    The name of every ``requires`` clause is its last token, so modifiers
    such as ``transitive`` or ``static`` are dropped.  Duplicate clauses
    collapse.

    Raises:
        DescriptorFormatError: No ``module <name> { ... }`` declaration found.
    """
    source = _COMMENT_PATTERN.sub(" ", text)
    match = _MODULE_PATTERN.search(source)
    if match is None:
        msg = f"expected module descriptor unit, but got: {text!r}"
        raise DescriptorFormatError(msg)

    requires = frozenset(
        clause.group(1).split()[-1] for clause in _REQUIRES_PATTERN.finditer(match.group(2))
    )
    return ModuleDescriptor(name=match.group(1), requires=requires)


def read_descriptor(path: Path) -> ModuleDescriptor:
    """Read and parse the descriptor at *path*.

    A directory is taken to contain a ``module-info.java`` file.
    """
    if path.is_dir():
        path = path / DESCRIPTOR_FILENAME
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"reading '{path}' failed: {exc}"
        raise DescriptorFormatError(msg) from exc
    try:
        return parse_descriptor(text)
    except DescriptorFormatError as exc:
        msg = f"{path}: {exc}"
        raise DescriptorFormatError(msg) from exc


def find_descriptor_files(roots: Iterable[Path]) -> list[Path]:
    """Find every descriptor file below *roots*; missing roots are skipped."""
    found: list[Path] = []
    for root in roots:
        if not root.exists():
            continue
        found.extend(
            path
            for path in walk_tree(root)
            if path.name == DESCRIPTOR_FILENAME and path.is_file()
        )
    return found


def declared_modules(roots: Iterable[Path]) -> frozenset[str]:
    """Names of all modules declared below *roots*."""
    return frozenset(read_descriptor(path).name for path in find_descriptor_files(roots))


def external_modules(
    roots: Iterable[Path],
    *,
    system_modules: Iterable[str],
) -> frozenset[str]:
    """Modules required below *roots* that are neither declared there nor provided.

    ``required - declared - system_modules``.  The same module declared
    under several roots is absorbed by set union without complaint.
    """
    declared: set[str] = set()
    required: set[str] = set()
    for path in find_descriptor_files(roots):
        descriptor = read_descriptor(path)
        declared.add(descriptor.name)
        required.update(descriptor.requires)
    return frozenset(required - declared - set(system_modules))
