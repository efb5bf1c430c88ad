"""Plugin discovery and registration.

A plugin is any object with a ``register(converter)`` method; a class is
instantiated without arguments first. Plugins come from three places, loaded
in this order:

1. Built-ins (comment, sort, module_names), unless named in
   ``disable_plugins``.
2. Installed distributions advertising an entry point in the
   ``docgraph.plugins`` group, unless named in ``disable_plugins``.
3. Dotted ``module:attribute`` paths listed in ``plugins``.
"""

from __future__ import annotations

import importlib
from importlib.metadata import entry_points
from typing import TYPE_CHECKING, Any, Protocol

from docgraph.config.constants import PLUGIN_ENTRY_POINT_GROUP
from docgraph.core.errors import InternalError
from docgraph.core.logging import get_logger
from docgraph.plugins.comment import CommentPlugin
from docgraph.plugins.module_names import ModuleNamePlugin
from docgraph.plugins.sort import SortPlugin

if TYPE_CHECKING:
    from docgraph.converter.converter import Converter

log = get_logger("plugins.loader")


class Plugin(Protocol):
    def register(self, converter: Converter) -> None: ...


BUILTIN_PLUGINS: dict[str, type] = {
    CommentPlugin.name: CommentPlugin,
    SortPlugin.name: SortPlugin,
    ModuleNamePlugin.name: ModuleNamePlugin,
}


def _instantiate(name: str, obj: Any) -> Plugin:
    plugin = obj() if isinstance(obj, type) else obj
    if not callable(getattr(plugin, "register", None)):
        raise InternalError.plugin_load_failed(name, "no register(converter) method")
    return plugin


def import_plugin(path: str) -> Plugin:
    """Import a plugin from a ``module:attribute`` path.

    Raises:
        InternalError: If the path is malformed or the import fails.
    """
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise InternalError.plugin_load_failed(path, "expected 'module:attribute'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise InternalError.plugin_load_failed(path, str(e)) from e
    obj: Any = module
    for part in attribute.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise InternalError.plugin_load_failed(path, str(e)) from e
    return _instantiate(path, obj)


def discover_plugins(disabled: set[str]) -> list[tuple[str, Plugin]]:
    """Plugins advertised through installed entry points."""
    found = []
    for ep in entry_points(group=PLUGIN_ENTRY_POINT_GROUP):
        if ep.name in disabled:
            log.debug("plugin.disabled", plugin=ep.name)
            continue
        try:
            obj = ep.load()
        except Exception as e:
            raise InternalError.plugin_load_failed(ep.name, str(e)) from e
        found.append((ep.name, _instantiate(ep.name, obj)))
    return found


def load_plugins(converter: Converter) -> list[Plugin]:
    """Register every enabled plugin with ``converter`` and return them."""
    config = converter.config
    disabled = set(config.disable_plugins)

    plugins: list[tuple[str, Plugin]] = [
        (name, cls()) for name, cls in BUILTIN_PLUGINS.items() if name not in disabled
    ]
    plugins.extend(discover_plugins(disabled))
    plugins.extend((path, import_plugin(path)) for path in config.plugins)

    for name, plugin in plugins:
        plugin.register(converter)
        log.debug("plugin.loaded", plugin=name)
    log.info("plugins.loaded", count=len(plugins), disabled=sorted(disabled))
    return [plugin for _, plugin in plugins]
