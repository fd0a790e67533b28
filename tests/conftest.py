"""Shared pytest fixtures and test helpers for bachctl tests."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import IO

import pluggy
import pytest
from click.testing import CliRunner

from bachctl.config.settings import BachSettings
from bachctl.infrastructure.tools import LineSink
from bachctl.plugins.manager import PluginManager
from bachctl.services.context import BuildContext

hookimpl = pluggy.HookimplMarker("bachctl")

SYSTEM_MODULES = frozenset({"java.base", "java.logging", "java.sql"})


@pytest.fixture(autouse=True)
def _clean_bach_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``BACH_*`` variables of the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("BACH_"):
            monkeypatch.delenv(key)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> BachSettings:
    """Settings for a project rooted at a temporary directory."""
    return BachSettings.from_cli(base=tmp_path)


@pytest.fixture
def plugin_manager() -> PluginManager:
    """Plugin manager with entry points and built-in tools loaded."""
    pm = PluginManager()
    pm.discover_and_load()
    return pm


@pytest.fixture
def make_context(
    plugin_manager: PluginManager,
) -> Callable[..., BuildContext]:
    """Factory building a context whose system modules are :data:`SYSTEM_MODULES`.

    Extra positional arguments are tool providers registered for the context.
    """

    def factory(
        settings: BachSettings,
        *tools: object,
        out: LineSink | None = None,
        err: LineSink | None = None,
    ) -> BuildContext:
        if tools:
            register_tools(plugin_manager, *tools)
        return BuildContext.create(
            settings,
            plugin_manager=plugin_manager,
            system_modules=lambda: SYSTEM_MODULES,
            out=out,
            err=err,
        )

    return factory


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


class RecordingTool:
    """In-process tool that records its arguments and prints canned output."""

    def __init__(
        self,
        name: str,
        *,
        code: int = 0,
        lines: Sequence[str] = (),
        error_lines: Sequence[str] = (),
    ) -> None:
        self.name = name
        self.code = code
        self.lines = list(lines)
        self.error_lines = list(error_lines)
        self.calls: list[list[str]] = []

    def run(self, args: Sequence[str], out: IO[str], err: IO[str]) -> int:
        self.calls.append(list(args))
        for line in self.lines:
            print(line, file=out)
        for line in self.error_lines:
            print(line, file=err)
        return self.code


class ToolsPlugin:
    """Plugin contributing a fixed list of tool providers."""

    def __init__(self, *tools: object) -> None:
        self.tools = list(tools)

    @hookimpl
    def register_tool_providers(self) -> list[object]:
        return self.tools


def register_tools(pm: PluginManager, *tools: object) -> ToolsPlugin:
    """Register *tools* with *pm* under a unique plugin name."""
    plugin = ToolsPlugin(*tools)
    pm.register_plugin(plugin, name=f"tools-{id(plugin)}")
    return plugin


def write_module(root: Path, name: str, *requires: str) -> Path:
    """Write ``<root>/<name>/module-info.java`` declaring *name* and *requires*."""
    clauses = "".join(f"  requires {required};\n" for required in requires)
    descriptor = root / name / "module-info.java"
    descriptor.parent.mkdir(parents=True, exist_ok=True)
    descriptor.write_text(f"module {name} {{\n{clauses}}}\n", encoding="utf-8")
    return descriptor


def write_source(path: Path, body: str = "class X {}\n") -> Path:
    """Write a source file at *path*, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    return path
