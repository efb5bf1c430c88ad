"""Conversion context: the run being converted and the container new reflections are added to."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from docgraph.models.ids import IdAllocator
from docgraph.semantic.model import DeclarationKind, SemanticModel, Symbol

if TYPE_CHECKING:
    from docgraph.converter.converter import Converter
    from docgraph.models.project import ProjectReflection
    from docgraph.models.reflections import ContainerReflection


@dataclass
class ConversionRun:
    """State owned by a single ``Converter.convert`` call.

    Each call creates its own run, so ids start at 0 for every project and
    overlapping calls on one converter never share a counter.
    """

    model: SemanticModel
    project: ProjectReflection
    ids: IdAllocator
    # Symbols whose resolved type is being converted; breaks recursive types.
    seen_type_symbols: set[Symbol] = field(default_factory=set)


class Context:
    """Immutable view of where conversion currently is.

    Contexts are cheap: converters derive a new one with ``with_container``
    whenever they descend into a container reflection.
    """

    def __init__(self, converter: Converter, run: ConversionRun, container: ContainerReflection) -> None:
        self.converter = converter
        self.run = run
        self.container = container

    @property
    def model(self) -> SemanticModel:
        return self.run.model

    @property
    def project(self) -> ProjectReflection:
        return self.run.project

    def with_container(self, container: ContainerReflection) -> Context:
        return Context(self.converter, self.run, container)

    def next_id(self) -> int:
        """Allocate the next reflection id of the current run."""
        return self.run.ids.next_id()

    def get_exports(self, symbol: Symbol) -> list[Symbol]:
        return list(symbol.exports.values())

    def get_exports_of_kind(
        self, symbol: Symbol, kinds: DeclarationKind | Iterable[DeclarationKind]
    ) -> list[Symbol]:
        """Exports of ``symbol`` with at least one declaration of the given kinds."""
        wanted = {kinds} if isinstance(kinds, DeclarationKind) else set(kinds)
        return [
            child
            for child in symbol.exports.values()
            if any(d.kind in wanted for d in self.model.get_declarations(child))
        ]
