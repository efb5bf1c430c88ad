"""Orders container children for display once conversion has ended."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from docgraph.config.models import SortStrategy
from docgraph.core.logging import get_logger
from docgraph.models.kinds import ReflectionKind, kind_from_string
from docgraph.models.project import ProjectReflection
from docgraph.models.reflections import ContainerReflection, Reflection

if TYPE_CHECKING:
    from docgraph.converter.converter import Converter

log = get_logger("plugins.sort")

SortKey = Callable[[Reflection], Any]


def kind_weights(sort_order: Sequence[str]) -> dict[ReflectionKind, int]:
    """Map kind names like ``"enumMember"`` to their position; unknown names are skipped."""
    weights: dict[ReflectionKind, int] = {}
    for name in sort_order:
        kind = kind_from_string(name)
        if kind is None:
            log.warning("sort.unknown_kind", kind=name)
            continue
        weights.setdefault(ReflectionKind(kind), len(weights))
    return weights


def make_sort_key(strategy: SortStrategy, weights: dict[ReflectionKind, int]) -> SortKey | None:
    """Sort key for ``strategy``, or None when children keep creation order."""
    unlisted = len(weights)

    def by_kind(reflection: Reflection) -> int:
        return weights.get(reflection.kind, unlisted)

    def by_name(reflection: Reflection) -> tuple[str, str]:
        return (reflection.name.lower(), reflection.name)

    if strategy == "kind":
        return by_kind
    if strategy == "alphabetical":
        return by_name
    if strategy == "kind-then-alphabetical":
        return lambda reflection: (by_kind(reflection), by_name(reflection))
    return None


def sort_project(project: ProjectReflection, key: SortKey) -> None:
    """Sort the children of every container in the tree, project included."""
    to_visit: list[Reflection] = [project]
    while to_visit:
        item = to_visit.pop()
        if isinstance(item, ContainerReflection):
            item.children.sort(key=key)
            to_visit.extend(item.children)


class SortPlugin:
    name = "sort"

    def __init__(self) -> None:
        self.key: SortKey | None = None

    def register(self, converter: Converter) -> None:
        config = converter.config
        self.key = make_sort_key(config.sort, kind_weights(config.sort_order))
        converter.events.on(converter.EVENT_END, self.on_end)

    def on_end(self, project: ProjectReflection) -> None:
        if self.key is not None:
            sort_project(project, self.key)
