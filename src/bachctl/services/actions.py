"""Build actions: discrete steps run by the pipeline.

Each action is a frozen value carrying only its own parameters.
``run(context)`` returns an exit code: zero for success, anything else
aborts the pipeline.  Faults are caught here and logged; they never
propagate to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import requests

from bachctl import __version__
from bachctl.config.models import Property
from bachctl.domain.errors import BachError, PreconditionError
from bachctl.infrastructure.download import download
from bachctl.infrastructure.filesystem import (
    PathFilter,
    accept_all,
    copy_tree,
    delete_tree,
    tree_lines,
)

if TYPE_CHECKING:
    from bachctl.domain.command import Command
    from bachctl.infrastructure.tools import LineSink
    from bachctl.services.context import BuildContext

logger = logging.getLogger(__name__)


class Action:
    """Base for build actions."""

    @property
    def name(self) -> str:
        """Human-readable action name."""
        return type(self).__name__

    def run(self, context: BuildContext) -> int:
        """Run this action and return zero on success."""
        raise NotImplementedError


@dataclass(frozen=True)
class Banner(Action):
    """Log the tool banner and the resolved properties."""

    def run(self, context: BuildContext) -> int:
        project = context.project
        logger.info("bachctl %s - %s %s", __version__, project.name, project.version)
        for prop in Property:
            logger.debug("%s = %s", prop.key, context.settings.value(prop))
        return 0


@dataclass(frozen=True)
class Check(Action):
    """Verify preconditions: the base path must be a named directory."""

    def run(self, context: BuildContext) -> int:
        try:
            check_base(context.base)
        except PreconditionError as exc:
            logger.error("%s", exc)
            return 1
        return 0


def check_base(base: Path) -> None:
    """Raise :class:`PreconditionError` unless *base* is usable as a project base."""
    resolved = base.resolve()
    if resolved == Path(resolved.anchor):
        msg = f"Base path has zero elements: {base}"
        raise PreconditionError(msg)
    if not resolved.is_dir():
        msg = f"Base path is not a directory: {base}"
        raise PreconditionError(msg)


@dataclass(frozen=True)
class Build(Action):
    """Build the project: compile every realm."""

    def run(self, context: BuildContext) -> int:
        return context.project.build(context)


@dataclass(frozen=True)
class Tool(Action):
    """Run a single tool command through the tool runner."""

    command: Command

    def run(self, context: BuildContext) -> int:
        logger.info("Running tool: %s %s", self.command.name, " ".join(self.command.arguments))
        if logger.isEnabledFor(logging.DEBUG):
            self.command.dump(logger.debug)
        return context.runner.execute(self.command, context.out, context.err)


@dataclass(frozen=True)
class TreeCopy(Action):
    """Copy files accepted by *predicate* from *source* into *target*.

    Exit codes: 1 source is not a directory, 2 target is not a directory,
    3 an existing target lies inside source, 4 I/O failure.  A missing
    source or an identical target is a successful no-op.
    """

    source: Path
    target: Path
    predicate: PathFilter = field(default=accept_all)

    def run(self, context: BuildContext) -> int:
        if not self.source.exists():
            return 0
        if not self.source.is_dir():
            logger.error("Copy source must be a directory: %s", self.source)
            return 1
        if self.target.exists():
            if not self.target.is_dir():
                logger.error("Copy target must be a directory: %s", self.target)
                return 2
            if self.target.resolve() == self.source.resolve():
                return 0
            if self.target.resolve().is_relative_to(self.source.resolve()):
                logger.error("Copy target %s lies inside source %s", self.target, self.source)
                return 3
        try:
            copy_tree(self.source, self.target, self.predicate)
        except OSError as exc:
            logger.error("Copying tree failed: %s", exc)
            return 4
        return 0


@dataclass(frozen=True)
class TreeDelete(Action):
    """Delete entries below *root* accepted by *predicate*."""

    root: Path
    predicate: PathFilter = field(default=accept_all)

    def run(self, context: BuildContext) -> int:
        try:
            delete_tree(self.root, self.predicate)
        except OSError as exc:
            logger.error("Deleting tree failed: %s (%s)", self.root, exc)
            return 1
        return 0


@dataclass(frozen=True)
class TreeWalk(Action):
    """Emit a sorted listing of *root* to *sink* (tool output by default)."""

    root: Path
    sink: LineSink | None = None

    def run(self, context: BuildContext) -> int:
        sink = self.sink or context.out
        try:
            for line in tree_lines(self.root):
                sink(line)
        except OSError as exc:
            logger.error("%s", exc)
            return 1
        return 0


@dataclass(frozen=True)
class Download(Action):
    """Download each of *uris* into *destination*, honouring offline mode."""

    destination: Path
    uris: tuple[str, ...]

    def run(self, context: BuildContext) -> int:
        logger.debug("Downloading %d file(s) to %s...", len(self.uris), self.destination)
        try:
            for uri in self.uris:
                download(uri, self.destination, offline=context.settings.offline)
        except (BachError, OSError, requests.RequestException) as exc:
            logger.error("Download failed: %s", exc)
            return 1
        return 0
