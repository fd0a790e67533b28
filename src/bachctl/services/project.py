"""Project object model: the project and its realms.

A realm is a named source scope (``main``, ``test``) with its own source
and target directories and module sets.  The ``test`` realm refers back to
``main`` as its parent; the reference is read-only.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING

from bachctl.domain.command import Command
from bachctl.domain.errors import CompileFailure
from bachctl.domain.modules import declared_modules, external_modules
from bachctl.services.actions import Tool
from bachctl.services.pipeline import run_actions

if TYPE_CHECKING:
    from bachctl.config.settings import BachSettings
    from bachctl.services.context import BuildContext

logger = logging.getLogger(__name__)

COMPILER = "javac"
TARGET_DIRECTORY = Path("bin", "compiled")

SystemModules = Callable[[], Iterable[str]]


def layout_candidates(base: Path, realm: str, *, shared: bool = False) -> list[Path]:
    """Candidate source directories for *realm*, in priority order.

    ``src/<realm>/java`` then ``src/<realm>``; with *shared*, the bare
    ``src`` directory as a last resort.
    """
    candidates = [base / "src" / realm / "java", base / "src" / realm]
    if shared:
        candidates.append(base / "src")
    return candidates


class Realm:
    """A named source scope with resolved source and target directories.

    The source is the first existing directory among *candidates*; when
    none exists it falls back to *base* and ``source_found`` is False,
    which turns :meth:`compile` into a no-op.
    """

    def __init__(
        self,
        name: str,
        candidates: Sequence[Path],
        base: Path,
        *,
        system_modules: SystemModules,
        parent: Realm | None = None,
    ) -> None:
        self.name = name
        self.parent = parent
        self._system_modules = system_modules
        found = next((path for path in candidates if path.is_dir()), None)
        self.source_found = found is not None
        self.source = found if found is not None else base
        self.target = base / TARGET_DIRECTORY / name

    def __repr__(self) -> str:
        return f"Realm({self.name!r}, source={str(self.source)!r})"

    @property
    def source_roots(self) -> list[Path]:
        """Roots scanned for descriptors: the parent's first, then this realm's."""
        roots = list(self.parent.source_roots) if self.parent else []
        if self.source_found and self.source not in roots:
            roots.append(self.source)
        return roots

    @cached_property
    def declared_modules(self) -> frozenset[str]:
        """Modules declared in this realm's source, plus those of its parent."""
        own = declared_modules([self.source]) if self.source_found else frozenset()
        inherited = self.parent.declared_modules if self.parent else frozenset()
        return own | inherited

    @cached_property
    def external_modules(self) -> frozenset[str]:
        """Required modules neither declared in :attr:`source_roots` nor system-provided."""
        return external_modules(self.source_roots, system_modules=self._system_modules())

    def module_path(self, settings: BachSettings) -> list[Path]:
        """Existing directories holding modules this realm compiles against."""
        candidates: list[Path] = []
        if self.parent is not None:
            candidates.append(self.parent.target)
        candidates.append(settings.based(settings.paths.cache_modules))
        return [path for path in candidates if path.is_dir()]

    def compile(self, context: BuildContext) -> int:
        """Compile every source file of this realm into its target directory.

        Returns 0, also when there is nothing to compile.

        Raises:
            CompileFailure: The compiler exited with a non-zero code.
        """
        logger.debug("Compiling %s", self.name)
        if not self.source_found or not self.source.is_dir():
            logger.info("Skip compile for %s! No source path exists: %s", self.name, self.source)
            return 0

        javac = Command(COMPILER).add("-d").add(self.target)
        module_path = self.module_path(context.settings)
        if module_path:
            javac.add("--module-path").add_paths(module_path)
        javac.add("--module-source-path").add(self.source)
        javac.add_all_source_files([self.source])

        code = run_actions(context, [Tool(javac)])
        if code != 0:
            raise CompileFailure(self.name, code)
        return 0


class Project:
    """Project name, version, dormant flag, and realms in build order."""

    def __init__(self, settings: BachSettings, *, system_modules: SystemModules) -> None:
        base = settings.base
        self.dormant = settings.project.dormant  # mutable for tests
        self.name = settings.project_name
        self.version = settings.project.version
        self.main = Realm(
            "main",
            layout_candidates(base, "main", shared=True),
            base,
            system_modules=system_modules,
        )
        self.test = Realm(
            "test",
            layout_candidates(base, "test"),
            base,
            system_modules=system_modules,
            parent=self.main,
        )
        self.realms: tuple[Realm, ...] = (self.main, self.test)

    def build(self, context: BuildContext) -> int:
        """Compile all realms in order, stopping at the first failure."""
        if self.dormant:
            logger.info("Dormant mode is enabled, not building %s.", self.name)
            return 0
        try:
            for realm in self.realms:
                realm.compile(context)
        except CompileFailure as exc:
            logger.error("Building project failed: %s", exc)
            return 1
        except Exception:
            logger.exception("Building project failed.")
            return 1
        return 0
