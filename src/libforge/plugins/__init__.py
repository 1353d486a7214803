"""Extension layer: plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus single-file plugins from ``.libforge/plugins/``.
INVARIANT: Lifecycle notification failures are warnings, never errors.
Status-provider and sync hooks are part of the pipeline and propagate.
"""

from libforge.plugins.manager import PluginManager

__all__ = ["PluginManager"]
