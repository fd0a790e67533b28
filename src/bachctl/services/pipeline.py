"""Action pipeline: sequential, fail-fast execution of build actions.

INVARIANT: Actions run strictly one after another.  The first non-zero
exit code stops the pipeline and becomes its result.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from bachctl.domain.command import Command
from bachctl.services.actions import Action, Banner, Build, Check, Tool

if TYPE_CHECKING:
    from bachctl.services.context import BuildContext

logger = logging.getLogger(__name__)

TOOL_OPERATION = "tool"


def run_actions(context: BuildContext, actions: Sequence[Action]) -> int:
    """Run *actions* in order and return the first non-zero code, else 0."""
    if not actions:
        logger.warning("No actions to run...")
    for action in actions:
        logger.debug("Running action %s...", action.name)
        try:
            code = action.run(context)
        except Exception:
            logger.exception("Action %s raised an unexpected error", action.name)
            code = 1
        if code != 0:
            logger.error("Action %s failed with error code: %d", action.name, code)
            return code
        logger.debug("Action %s succeeded.", action.name)
    return 0


def default_actions() -> list[Action]:
    """Actions run when no operation is given: banner, check, build."""
    return [Banner(), Check(), Build()]


def tool_actions(name: str, args: Sequence[str]) -> list[Action]:
    """Actions for an ad-hoc tool invocation: banner, check, then the tool."""
    return [Banner(), Check(), Tool(Command(name).add_all(args))]


def run(context: BuildContext, arguments: Sequence[str]) -> int:
    """Dispatch the raw operation *arguments* to an action sequence.

    * no arguments: the default actions
    * ``tool <name> [args...]``: the tool actions, output on the standard
      streams (the operation name is case-insensitive)
    * anything else: an error
    """
    if not arguments:
        return run_actions(context, default_actions())

    operation, *rest = arguments
    if operation.lower() == TOOL_OPERATION:
        if not rest:
            logger.error("Missing name of tool to run!")
            return 1
        name, *args = rest
        return run_actions(context.with_standard_streams(), tool_actions(name, args))

    logger.error("Unsupported operation: %s", " ".join(arguments))
    return 1
