"""BuildContext: the explicit per-invocation state threaded through actions.

Created once per invocation and passed as an argument to every action
and realm operation.  It is never stored globally.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from bachctl.config.logging import TOOL_LOGGER
from bachctl.infrastructure.tools import LineSink, ToolRunner

if TYPE_CHECKING:
    from pathlib import Path

    from bachctl.config.settings import BachSettings
    from bachctl.plugins.manager import PluginManager
    from bachctl.services.project import Project

logger = logging.getLogger("bachctl")
tool_logger = logging.getLogger(TOOL_LOGGER)


def _log_out(line: str) -> None:
    tool_logger.debug("%s", line, extra={"stream": "out"})


def _log_err(line: str) -> None:
    tool_logger.error("%s", line, extra={"stream": "err"})


def _stdout(line: str) -> None:
    print(line, file=sys.stdout, flush=True)


def _stderr(line: str) -> None:
    print(line, file=sys.stderr, flush=True)


@dataclass(frozen=True)
class BuildContext:
    """Settings snapshot, project model, tool runner, and output sinks.

    Attributes:
        out: Receives tool standard output lines (debug log by default).
        err: Receives tool error output lines (error log by default).
    """

    settings: BachSettings
    project: Project
    runner: ToolRunner
    out: LineSink = _log_out
    err: LineSink = _log_err

    @property
    def base(self) -> Path:
        return self.settings.base

    @property
    def logger(self) -> logging.Logger:
        return logger

    def with_sinks(self, out: LineSink, err: LineSink) -> BuildContext:
        """Return a copy of this context writing tool output to *out* and *err*."""
        return replace(self, out=out, err=err)

    def with_standard_streams(self) -> BuildContext:
        """Return a copy of this context wired to the process's stdout and stderr."""
        return self.with_sinks(_stdout, _stderr)

    @classmethod
    def create(
        cls,
        settings: BachSettings,
        *,
        plugin_manager: PluginManager | None = None,
        system_modules: Callable[[], Iterable[str]] | None = None,
        out: LineSink | None = None,
        err: LineSink | None = None,
    ) -> BuildContext:
        """Build the tool runner and project model for *settings*.

        *system_modules* overrides the platform module query, which by
        default asks ``java --list-modules`` through the same runner.
        """
        from bachctl.infrastructure.jdk import find_system_module_names
        from bachctl.services.project import Project

        runner = ToolRunner(plugin_manager)

        def query_system_modules() -> Iterable[str]:
            return find_system_module_names(runner)

        project = Project(settings, system_modules=system_modules or query_system_modules)
        return cls(
            settings=settings,
            project=project,
            runner=runner,
            out=out or _log_out,
            err=err or _log_err,
        )
