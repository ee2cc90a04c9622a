"""Extension layer: rule plugins via pluggy.

Discovery: entry_points (``shrinker.rules`` group) plus single-file
plugins from a local directory.
INVARIANT: Plugin failures are warnings, never errors.
"""

from shrinker.plugins.hookspecs import hookimpl
from shrinker.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
