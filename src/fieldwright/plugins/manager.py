"""Plugin discovery and loading.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus local directory discovery of single-file plugins.
Capabilities: field types, field definitions, validators, display formatters.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pluggy

from fieldwright.fields.base import FieldType
from fieldwright.plugins.hookspecs import FieldwrightHookSpec

if TYPE_CHECKING:
    from fieldwright.fields.context import FieldContext

PROJECT_NAME = "fieldwright"
ENTRY_POINT_GROUP = "fieldwright.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and contribution collection."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(FieldwrightHookSpec)
        self._loaded: bool = False

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Discover plugins from entry points and an optional local directory.

        Uses pluggy's native setuptools entry_point discovery for the
        ``fieldwright.plugins`` group, then scans *local_dir* for
        single-file Python plugins.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Contributions
    # ------------------------------------------------------------------

    def collect_field_types(self, context: FieldContext) -> list[FieldType]:
        """Field type instances from every plugin, built against *context*."""
        collected: list[FieldType] = []
        for plugin_name, items in self._collect("register_field_types", context=context):
            for item in items:
                if isinstance(item, FieldType):
                    collected.append(item)
                else:
                    logger.warning(
                        "Plugin %s returned %r, which is not a FieldType",
                        plugin_name,
                        item,
                    )
        return collected

    def collect_fields(self) -> list[dict[str, Any]]:
        """Field definition mappings from every plugin."""
        collected: list[dict[str, Any]] = []
        for plugin_name, items in self._collect("register_fields"):
            for item in items:
                if isinstance(item, dict):
                    collected.append(item)
                else:
                    logger.warning("Plugin %s returned a non-dict field definition", plugin_name)
        return collected

    def collect_validators(self) -> list[Callable[..., Any]]:
        return self._collect_callables("register_validators")

    def collect_display_formatters(self) -> list[Callable[..., Any]]:
        return self._collect_callables("register_display_formatters")

    def _collect_callables(self, hook_name: str) -> list[Callable[..., Any]]:
        collected: list[Callable[..., Any]] = []
        for plugin_name, items in self._collect(hook_name):
            for item in items:
                if callable(item):
                    collected.append(item)
                else:
                    logger.warning("Plugin %s returned a non-callable from %s", plugin_name, hook_name)
        return collected

    def _collect(self, hook_name: str, **kwargs: Any) -> list[tuple[str, list[Any]]]:
        """Call *hook_name* on each plugin in turn, isolating failures.

        Returns ``(plugin_name, items)`` pairs for plugins that returned a
        list; ``None`` means the plugin has nothing to contribute.
        """
        results: list[tuple[str, list[Any]]] = []
        for plugin in self._pm.get_plugins():
            hook = getattr(plugin, hook_name, None)
            if hook is None:
                continue
            plugin_name = self._pm.get_name(plugin) or plugin.__class__.__name__
            try:
                returned = hook(**kwargs)
            except Exception:
                logger.warning(
                    "Plugin %s failed in %s",
                    plugin_name,
                    hook_name,
                    exc_info=True,
                )
                continue
            if returned is None:
                continue
            if not isinstance(returned, (list, tuple)):
                logger.warning("Plugin %s returned a non-list from %s", plugin_name, hook_name)
                continue
            results.append((plugin_name, list(returned)))
        return results

    # ------------------------------------------------------------------
    # Local directory discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Scan *local_dir* for single-file Python plugins.

        Each ``*.py`` file (excluding ``_``-prefixed names) is loaded as a
        module. Classes inside the module that carry pluggy hookimpl-decorated
        methods are instantiated and registered.

        Errors are logged as warnings but never raised.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"fieldwright_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                sys.modules.pop(module_name, None)
                continue

            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name:
                    continue
                if not self._has_hook_impls(obj):
                    continue
                try:
                    instance = obj()
                    self.register_plugin(instance, name=f"{module_name}.{obj.__name__}")
                    logger.debug("Loaded local plugin %s from %s", obj.__name__, py_file)
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly, which
        leaves ``self`` unbound when its hooks are called.
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
        """Check whether *cls* has any methods decorated with ``@hookimpl``.

        Pluggy's ``HookimplMarker("fieldwright")`` sets a
        ``fieldwright_impl`` attribute on decorated methods.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, "fieldwright_impl", None):
                return True
        return False
