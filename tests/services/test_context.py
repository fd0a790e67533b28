"""Tests for BuildContext construction and sink wiring."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable

import pytest

from bachctl.config.settings import BachSettings
from bachctl.plugins.manager import PluginManager
from bachctl.services.context import BuildContext
from tests.conftest import RecordingTool, register_tools


class TestCreate:
    def test_wires_settings_and_project(
        self, settings: BachSettings, make_context: Callable[..., BuildContext]
    ) -> None:
        context = make_context(settings)
        assert context.settings is settings
        assert context.base == settings.base
        assert context.project.name == settings.base.name
        assert context.logger.name == "bachctl"

    def test_runner_uses_plugin_manager(
        self, settings: BachSettings, plugin_manager: PluginManager
    ) -> None:
        java = RecordingTool("java", lines=["java.base@21", "java.xml@21"])
        register_tools(plugin_manager, java)
        context = BuildContext.create(settings, plugin_manager=plugin_manager)
        assert context.project.main.external_modules == frozenset()
        assert java.calls == [["--list-modules"]]

    def test_frozen(self, settings: BachSettings, make_context: Callable[..., BuildContext]) -> None:
        context = make_context(settings)
        with pytest.raises(dataclasses.FrozenInstanceError):
            context.out = print  # type: ignore[misc]


class TestSinks:
    def test_default_sinks_log(
        self,
        settings: BachSettings,
        make_context: Callable[..., BuildContext],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        context = make_context(settings)
        with caplog.at_level(logging.DEBUG, logger="bachctl"):
            context.out("standard line")
            context.err("error line")
        levels = {
            record.getMessage(): record.levelno
            for record in caplog.records
            if record.getMessage().endswith(" line")
        }
        assert levels == {"standard line": logging.DEBUG, "error line": logging.ERROR}
        tool_records = [r for r in caplog.records if r.name == "bachctl.tool"]
        assert [r.stream for r in tool_records] == ["out", "err"]

    def test_with_sinks_copies(
        self, settings: BachSettings, make_context: Callable[..., BuildContext]
    ) -> None:
        context = make_context(settings)
        lines: list[str] = []
        copy = context.with_sinks(lines.append, lines.append)
        copy.out("x")
        assert lines == ["x"]
        assert context.out is not copy.out
        assert copy.project is context.project

    def test_standard_streams(
        self,
        settings: BachSettings,
        make_context: Callable[..., BuildContext],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        context = make_context(settings).with_standard_streams()
        context.out("to stdout")
        context.err("to stderr")
        captured = capsys.readouterr()
        assert captured.out == "to stdout\n"
        assert captured.err == "to stderr\n"
