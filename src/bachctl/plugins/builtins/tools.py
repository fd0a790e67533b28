"""Built-in in-process tools.

``tree [root]``
    Print a sorted listing of *root* (default: current directory).
``modules root...``
    Print the external modules required below the given roots.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import IO

import pluggy

from bachctl.domain.errors import BachError
from bachctl.domain.modules import external_modules
from bachctl.infrastructure.filesystem import tree_lines
from bachctl.infrastructure.jdk import find_system_module_names

hookimpl = pluggy.HookimplMarker("bachctl")


class TreeTool:
    name = "tree"

    def run(self, args: Sequence[str], out: IO[str], err: IO[str]) -> int:
        root = Path(args[0]) if args else Path.cwd()
        try:
            for line in tree_lines(root):
                print(line, file=out)
        except OSError as exc:
            print(exc, file=err)
            return 1
        return 0


class ModulesTool:
    name = "modules"

    def run(self, args: Sequence[str], out: IO[str], err: IO[str]) -> int:
        if not args:
            print("usage: modules ROOT...", file=err)
            return 2
        try:
            names = external_modules(
                [Path(arg) for arg in args],
                system_modules=find_system_module_names(),
            )
        except BachError as exc:
            print(exc, file=err)
            return 1
        for name in sorted(names):
            print(name, file=out)
        return 0


class BuiltinToolsPlugin:
    """Contributes the built-in tools; any other plugin's tool of the same name wins."""

    @hookimpl(trylast=True)
    def register_tool_providers(self) -> list[object]:
        return [TreeTool(), ModulesTool()]
