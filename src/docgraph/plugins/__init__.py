"""Converter plugins: comment post-processing, sorting and module names."""

from docgraph.plugins.comment import CommentPlugin
from docgraph.plugins.loader import BUILTIN_PLUGINS, Plugin, import_plugin, load_plugins
from docgraph.plugins.module_names import ModuleNamePlugin
from docgraph.plugins.sort import SortPlugin

__all__ = [
    "BUILTIN_PLUGINS",
    "CommentPlugin",
    "ModuleNamePlugin",
    "Plugin",
    "SortPlugin",
    "import_plugin",
    "load_plugins",
]
