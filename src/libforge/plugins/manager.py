"""Plugin registry for libforge.

Plugins come from three places, registered in this order:

1. built-ins the workspace adds itself (git status, catalog sync);
2. packages exposing a ``libforge.plugins`` entry point;
3. single-file plugins under ``.libforge/plugins/`` in the workspace.

pluggy calls the most recently registered implementation first, so a
local plugin can answer ``working_tree_status`` before the git built-in.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType
from typing import Any

import pluggy

from libforge.plugins.hookspecs import LibforgeHookSpec

PROJECT_NAME = "libforge"
ENTRY_POINT_GROUP = f"{PROJECT_NAME}.plugins"
LOCAL_MODULE_PREFIX = f"{PROJECT_NAME}_local_plugin_"

logger = logging.getLogger(__name__)


def implements_hooks(cls: type) -> bool:
    """True if any public attribute of *cls* carries a ``@hookimpl`` marker."""
    marker = f"{PROJECT_NAME}_impl"
    return any(
        callable(attr) and getattr(attr, marker, None) is not None
        for name, attr in inspect.getmembers(cls)
        if not name.startswith("_")
    )


def _import_file(path: Path) -> ModuleType | None:
    """Execute *path* as a fresh module; None (logged) if it does not import."""
    module_name = LOCAL_MODULE_PREFIX + path.stem
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        logger.warning("Cannot import local plugin %s", path)
        return None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        del sys.modules[module_name]
        logger.warning("Local plugin %s failed to import", path, exc_info=True)
        return None
    return module


def _plugin_classes(module: ModuleType) -> Iterator[type]:
    """Classes defined in *module* itself that implement at least one hook."""
    for _name, cls in inspect.getmembers(module, inspect.isclass):
        if cls.__module__ == module.__name__ and implements_hooks(cls):
            yield cls


class PluginManager:
    """Thin wrapper over :class:`pluggy.PluginManager` with libforge's hooks."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(LibforgeHookSpec)
        self._loaded = False

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    @property
    def is_loaded(self) -> bool:
        """Whether :meth:`discover_and_load` has run."""
        return self._loaded

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register an instance under *name* (defaults to its class name)."""
        name = name or type(plugin).__name__
        self._pm.register(plugin, name=name)
        logger.debug("Registered plugin: %s", name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins()]

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then the single-file plugins in *local_dir*.

        Returns the names of every registered plugin.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_entry_point_classes()
        if local_dir is not None and local_dir.is_dir():
            for path in sorted(local_dir.glob("*.py")):
                if not path.name.startswith("_"):
                    self._load_local(path)
        self._loaded = True
        return self.list_plugin_names()

    def notify(self, hook_name: str, warnings: list[str], **kwargs: Any) -> None:
        """Fire a ``post_*`` notification.

        A plugin that raises adds an entry to *warnings*; the step that
        triggered the notification still counts as done.
        """
        try:
            getattr(self._pm.hook, hook_name)(**kwargs)
        except Exception:
            logger.debug("Hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")

    def _load_local(self, path: Path) -> None:
        module = _import_file(path)
        if module is None:
            return
        for cls in _plugin_classes(module):
            try:
                instance = cls()
            except Exception:
                logger.warning("Cannot instantiate %s from %s", cls.__name__, path, exc_info=True)
                continue
            self.register_plugin(instance, name=f"{module.__name__}.{cls.__name__}")

    def _instantiate_entry_point_classes(self) -> None:
        # An entry point may name a class; its hooks would then be called unbound.
        for plugin in self._pm.get_plugins():
            if not (inspect.isclass(plugin) and implements_hooks(plugin)):
                continue
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                self._pm.register(plugin(), name=name)
            except Exception:
                logger.warning("Cannot instantiate entry-point plugin %s", name, exc_info=True)
