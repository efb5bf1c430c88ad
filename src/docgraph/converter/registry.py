"""Converter registries.

Three kinds of converters exist:

- ReflectionConverter: semantic declaration kind -> reflection
- TypeNodeConverter: syntactic type expression kind -> type
- ResolvedTypeConverter: checker type -> type, chosen by a ``supports`` predicate

The kind-keyed registries reject a second converter for the same kind at
registration time. The resolved registry is ordered by ``order`` and then by
registration sequence.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Generic, TypeVar

from docgraph.core.errors import RegistryError

if TYPE_CHECKING:
    from docgraph.converter.context import Context
    from docgraph.converter.converter import Converter
    from docgraph.models.reflections import Reflection
    from docgraph.models.types import Type
    from docgraph.semantic.model import (
        Declaration,
        DeclarationKind,
        ResolvedType,
        Symbol,
        TypeNode,
        TypeNodeKind,
    )

K = TypeVar("K", bound=Enum)
C = TypeVar("C")

# (context, symbol, declarations) -> reflection
ConvertFn = Callable[["Context", "Symbol", "list[Declaration]"], Awaitable["Reflection"]]
# (context, reflection, symbol, declarations) -> None, runs after reflection_created
ConvertChildrenFn = Callable[
    ["Context", "Reflection", "Symbol", "list[Declaration]"], Awaitable[None]
]


@dataclass(frozen=True)
class ReflectionConverter:
    """Turns the declarations of one symbol into a reflection."""

    kinds: tuple[DeclarationKind, ...]
    convert: ConvertFn
    convert_children: ConvertChildrenFn | None = None


@dataclass(frozen=True)
class TypeNodeConverter:
    kinds: tuple[TypeNodeKind, ...]
    convert: Callable[[Converter, TypeNode], Type]


@dataclass(frozen=True)
class ResolvedTypeConverter:
    """Converts checker types. Lower ``order`` is tried first."""

    name: str
    supports: Callable[[ResolvedType], bool]
    convert: Callable[[Converter, ResolvedType], Type]
    order: int = 0


class KindRegistry(Generic[K, C]):
    """Maps each kind to exactly one converter."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._converters: dict[K, C] = {}

    def register(self, kinds: Iterable[K], converter: C) -> None:
        kinds = list(kinds)
        for kind in kinds:
            if kind in self._converters:
                raise RegistryError.duplicate_converter(self._name, kind.value)
        for kind in kinds:
            self._converters[kind] = converter

    def get(self, kind: K) -> C | None:
        return self._converters.get(kind)

    def __contains__(self, kind: object) -> bool:
        return kind in self._converters

    def __len__(self) -> int:
        return len(self._converters)


class OrderedRegistry:
    """Resolved type converters, tried in (order, registration) sequence."""

    def __init__(self) -> None:
        self._entries: list[tuple[int, int, ResolvedTypeConverter]] = []
        self._sequence = 0

    def register(self, converter: ResolvedTypeConverter) -> None:
        self._entries.append((converter.order, self._sequence, converter))
        self._sequence += 1
        self._entries.sort(key=lambda entry: (entry[0], entry[1]))

    def find(self, type: ResolvedType) -> ResolvedTypeConverter | None:
        """First converter whose predicate accepts ``type``."""
        for _, _, converter in self._entries:
            if converter.supports(type):
                return converter
        return None

    def __iter__(self):
        return (converter for _, _, converter in self._entries)

    def __len__(self) -> int:
        return len(self._entries)
