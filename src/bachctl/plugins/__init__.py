"""Extension layer: in-process tool providers via pluggy.

Discovery: entry_points (pip-installed) in the ``bachctl.plugins`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from bachctl.plugins.manager import PluginManager

__all__ = ["PluginManager"]
