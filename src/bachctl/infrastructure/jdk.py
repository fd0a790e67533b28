"""Queries against the installed Java runtime."""

from __future__ import annotations

import logging

from bachctl.domain.command import Command
from bachctl.domain.errors import ToolDispatchError
from bachctl.infrastructure.tools import ToolRunner

logger = logging.getLogger(__name__)


def find_system_module_names(runner: ToolRunner | None = None) -> frozenset[str]:
    """Enumerate the platform's system modules (``java.base``, ``java.sql``, ...).

    Runs ``java --list-modules`` and strips the ``@version`` suffix from
    each line.  Returns an empty set, with a single warning, when the
    runtime cannot be queried.
    """
    runner = runner or ToolRunner()
    lines: list[str] = []
    try:
        code = runner.run(Command("java", "--list-modules"), lines.append, logger.debug)
    except ToolDispatchError as exc:
        logger.warning("Could not enumerate system modules: %s", exc)
        return frozenset()
    if code != 0:
        logger.warning("Could not enumerate system modules: java exited with code %d", code)
        return frozenset()
    return frozenset(
        line.strip().split("@", 1)[0] for line in lines if line.strip()
    )
