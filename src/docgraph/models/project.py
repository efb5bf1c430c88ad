"""Project registry: the root reflection and the id/symbol tables.

The id table is the single source of truth for liveness. A reflection that is
not in the table has been removed, even if something still holds a Python
reference to it.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from docgraph.models.kinds import ReflectionKind
from docgraph.models.reflections import (
    ContainerReflection,
    Reflection,
    ReferenceReflection,
)

if TYPE_CHECKING:
    from docgraph.semantic.model import Symbol


class ProjectReflection(ContainerReflection):
    """Root of the reflection tree and owner of every registration."""

    kind = ReflectionKind.PROJECT
    child_kinds = ReflectionKind.MODULE

    def __init__(self, id: int, name: str) -> None:
        super().__init__(id, name)
        self._reflections: dict[int, Reflection] = {}
        self._symbol_to_ids: dict[Symbol, list[int]] = {}
        # target id -> ids of references pointing at it; None means stale.
        self._reference_graph: dict[int, list[int]] | None = None

    @property
    def project(self) -> ProjectReflection:
        return self

    @property
    def reflections(self) -> Mapping[int, Reflection]:
        """Read-only view of every live registered reflection, by id."""
        return MappingProxyType(self._reflections)

    # -------------------------------------------------------------------------
    # Registration and lookup
    # -------------------------------------------------------------------------

    def register(self, reflection: Reflection, symbol: Symbol | None = None) -> None:
        """Record a newly created independent reflection.

        Invalidates the reference graph, since the new reflection may be a
        reference.
        """
        self._reference_graph = None
        self._reflections[reflection.id] = reflection
        if symbol is not None:
            ids = self._symbol_to_ids.setdefault(symbol, [])
            if reflection.id not in ids:
                ids.append(reflection.id)

    def get_by_id(self, id: int) -> Reflection | None:
        return self._reflections.get(id)

    def get_by_symbol(self, symbol: Symbol) -> list[Reflection]:
        """Live reflections produced from ``symbol``, in registration order."""
        return [
            self._reflections[id]
            for id in self._symbol_to_ids.get(symbol, ())
            if id in self._reflections
        ]

    def get_by_kind(self, kind: ReflectionKind) -> list[Reflection]:
        return [r for r in self._reflections.values() if r.kind_of(kind)]

    def is_alive(self, reflection: Reflection) -> bool:
        return self._reflections.get(reflection.id) is reflection

    def walk(self) -> Iterator[Reflection]:
        """Depth-first walk of the container tree below the project."""
        stack: list[Reflection] = list(reversed(self.children))
        while stack:
            reflection = stack.pop()
            yield reflection
            if isinstance(reflection, ContainerReflection):
                stack.extend(reversed(reflection.children))

    # -------------------------------------------------------------------------
    # Removal
    # -------------------------------------------------------------------------

    def remove(self, reflection: Reflection) -> None:
        """Remove a reflection, the references pointing at it, and its children.

        The reference graph is read but never invalidated here: one cascade
        works from a single build of it.
        """
        graph = self._get_reference_graph()

        for reference_id in list(graph.get(reflection.id, ())):
            reference = self._reflections.get(reference_id)
            if reference is not None:
                self.remove(reference)
        graph.pop(reflection.id, None)

        if isinstance(reflection, ContainerReflection):
            for child in list(reflection.children):
                self.remove(child)

        parent = reflection.parent
        if isinstance(parent, ContainerReflection) and reflection in parent.children:
            parent.remove_child(reflection)

        self._reflections.pop(reflection.id, None)

    def _get_reference_graph(self) -> dict[int, list[int]]:
        if self._reference_graph is None:
            graph: dict[int, list[int]] = {}
            for reflection in self._reflections.values():
                if isinstance(reflection, ReferenceReflection):
                    target = reflection.resolve()
                    if target is not None:
                        graph.setdefault(target.id, []).append(reflection.id)
            self._reference_graph = graph
        return self._reference_graph
