"""Command line builder for tool invocations.

INVARIANT: Argument order mirrors call order. Nothing is reordered or
deduplicated.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from bachctl.domain.paths import walk_tree

SOURCE_EXTENSION = ".java"


def is_buildable_source(path: Path) -> bool:
    """Check whether *path* is a compilable source unit.

    True for a regular file named ``<name>.java`` with exactly one dot in
    its file name, so ``Foo.java`` qualifies while ``Foo.v2.java`` and
    ``Foo.java.bak`` do not.
    """
    if not path.is_file():
        return False
    name = path.name
    return name.endswith(SOURCE_EXTENSION) and name.count(".") == 1


class Command:
    """Tool name plus an ordered list of string arguments.

    Every mutator returns the command itself so calls can be chained::

        Command("javac").add("-d").add(target).add_all_source_files([src])
    """

    def __init__(self, name: str, *arguments: Any) -> None:
        self.name = name
        self.arguments: list[str] = []
        self.add_all(arguments)

    def __repr__(self) -> str:
        return f"Command({self.name!r}, {len(self.arguments)} argument(s))"

    def add(self, argument: Any) -> Command:
        """Append ``str(argument)``."""
        self.arguments.append(str(argument))
        return self

    def add_paths(self, paths: Iterable[str | Path]) -> Command:
        """Append a single argument joining *paths* with :data:`os.pathsep`."""
        return self.add(os.pathsep.join(str(path) for path in paths))

    def add_all(self, arguments: Iterable[Any]) -> Command:
        """Append each element of *arguments* as its own argument."""
        for argument in arguments:
            self.add(argument)
        return self

    def add_all_files(
        self,
        roots: Iterable[str | Path],
        predicate: Callable[[Path], bool],
    ) -> Command:
        """Append every path below *roots* accepted by *predicate*.

        Roots that do not exist are skipped silently.
        """
        for root in roots:
            root_path = Path(root)
            if not root_path.exists():
                continue
            for path in walk_tree(root_path):
                if predicate(path):
                    self.add(path)
        return self

    def add_all_source_files(self, roots: Iterable[str | Path]) -> Command:
        """Append every buildable source file below *roots*."""
        return self.add_all_files(roots, is_buildable_source)

    def dump(self, sink: Callable[[str], None]) -> Command:
        """Emit the tool name and one argument per line; non-flags are indented."""
        sink(self.name)
        for argument in self.arguments:
            indent = "" if argument.startswith("-") else "  "
            sink(indent + argument)
        return self

    def to_list(self) -> list[str]:
        """Return the argument vector ``[name, *arguments]``."""
        return [self.name, *self.arguments]
