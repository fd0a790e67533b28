"""Pluggy hook specifications for bachctl.

Plugins contribute in-process tool providers. A provider found here for
a tool name is preferred over spawning an external process.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from bachctl.infrastructure.tools import ToolProvider

hookspec = pluggy.HookspecMarker("bachctl")


class BachHookSpec:
    """Hook specifications for the bachctl plugin system."""

    @hookspec
    def register_tool_providers(self) -> list[ToolProvider] | None:
        """Return in-process tool providers offered by this plugin."""
