"""Plugin discovery, loading, and tool-provider lookup.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus the built-in plugin shipped with bachctl.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

import pluggy

from bachctl.plugins.hookspecs import BachHookSpec

if TYPE_CHECKING:
    from bachctl.infrastructure.tools import ToolProvider

PROJECT_NAME = "bachctl"
ENTRY_POINT_GROUP = "bachctl.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, registration, and tool lookup."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(BachHookSpec)

    def discover_and_load(self, *, builtins: bool = True) -> list[str]:
        """Load entry-point plugins and, unless disabled, the built-in tools.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        if builtins:
            from bachctl.plugins.builtins.tools import BuiltinToolsPlugin

            self._pm.register(BuiltinToolsPlugin(), name="builtin-tools")
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Tool providers
    # ------------------------------------------------------------------

    def find_tool(self, name: str) -> ToolProvider | None:
        """Return the first provider registered under *name*, or None."""
        return next((p for p in self._providers() if getattr(p, "name", None) == name), None)

    def tool_names(self) -> list[str]:
        """Return the sorted names of all available in-process tools."""
        return sorted({provider.name for provider in self._providers()})

    def _providers(self) -> Iterator[ToolProvider]:
        """Yield providers in hook call order (most recently registered first).

        A plugin whose hook raises is skipped with a warning.
        """
        for impl in reversed(self._pm.hook.register_tool_providers.get_hookimpls()):
            try:
                providers = impl.function() or []
            except Exception:
                logger.warning(
                    "Failed to collect tool providers from plugin %s",
                    impl.plugin_name,
                    exc_info=True,
                )
                continue
            yield from providers

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            if not self._has_hook_impls(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any methods decorated with ``@hookimpl``."""
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, "bachctl_impl", None):
                return True
        return False
