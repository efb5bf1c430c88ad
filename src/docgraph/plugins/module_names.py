"""Shortens module names once every entry file has been converted.

Module names start out as paths relative to the program root. Before the
run ends they lose any ``node_modules/`` prefix, declaration and source
extensions, trailing ``/index``, ``/lib`` and ``/src`` segments, and the
directory prefix that all of them share.
"""

from __future__ import annotations

import posixpath
import re
from collections.abc import Iterable
from typing import TYPE_CHECKING

from docgraph.config.constants import MODULE_NAME_SUFFIXES
from docgraph.core.logging import get_logger
from docgraph.models.kinds import ReflectionKind
from docgraph.models.project import ProjectReflection

if TYPE_CHECKING:
    from docgraph.converter.converter import Converter

log = get_logger("plugins.module_names")

_NODE_MODULES = re.compile(r"^(.*)node_modules/")
_HIDDEN_EXTENSIONS = (".ts", ".d")


def trim_module_name(name: str) -> str:
    name = _NODE_MODULES.sub("", name.replace('"', ""))

    extension = posixpath.splitext(name)[1]
    extensions = _HIDDEN_EXTENSIONS if extension in _HIDDEN_EXTENSIONS else (extension, *_HIDDEN_EXTENSIONS)
    for ext in extensions:
        if ext and name.endswith(ext):
            name = name[: -len(ext)]

    for suffix in MODULE_NAME_SUFFIXES:
        if name.endswith(suffix):
            name = name[: -len(suffix)]
    return name


def common_directory(names: Iterable[str]) -> str:
    """Longest directory prefix shared by every name, "" if there is none."""
    directories = [posixpath.dirname(name).split("/") for name in names]
    if not directories:
        return ""
    common = directories[0]
    for parts in directories[1:]:
        size = 0
        while size < min(len(common), len(parts)) and common[size] == parts[size]:
            size += 1
        common = common[:size]
    return "/".join(part for part in common if part)


class ModuleNamePlugin:
    name = "module_names"

    def register(self, converter: Converter) -> None:
        converter.events.on(converter.EVENT_FINALIZE_NAMES, self.on_finalize_names)

    def on_finalize_names(self, project: ProjectReflection) -> None:
        # Only names with a directory part are trimmed.
        modules = [m for m in project.get_by_kind(ReflectionKind.MODULE) if "/" in m.name]
        base = common_directory(_NODE_MODULES.sub("", m.name.replace('"', "")) for m in modules)

        for module in modules:
            name = trim_module_name(module.name)
            if base and name.startswith(base + "/"):
                name = name[len(base) + 1 :]
            if name and name != module.name:
                log.debug("module_names.renamed", original=module.name, name=name)
                module.name = name
