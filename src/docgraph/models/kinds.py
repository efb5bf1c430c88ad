"""Reflection and type kind flags.

Every kind is a single bit so that "is this a Module or Namespace" is one
bitwise test: ``kind & (ReflectionKind.MODULE | ReflectionKind.NAMESPACE)``.
"""

from __future__ import annotations

from enum import IntFlag

from docgraph.core.errors import ModelError


class ReflectionKind(IntFlag):
    """Kind tag of a reflection."""

    PROJECT = 0x1
    MODULE = 0x2
    NAMESPACE = 0x4
    ENUM = 0x8
    ENUM_MEMBER = 0x10
    VARIABLE = 0x20
    FUNCTION = 0x40
    CLASS = 0x80
    INTERFACE = 0x100
    OBJECT = 0x200
    PROPERTY = 0x400
    ACCESSOR = 0x800
    METHOD = 0x1000
    SIGNATURE = 0x2000
    PARAMETER = 0x4000
    ALIAS = 0x8000
    REFERENCE = 0x10000


class TypeKind(IntFlag):
    """Kind tag of a type expression."""

    ARRAY = 0x1
    CONDITIONAL = 0x2
    INDEXED_ACCESS = 0x4
    INFERRED = 0x8
    INTERSECTION = 0x10
    INTRINSIC = 0x20
    OBJECT = 0x40
    PROPERTY = 0x80
    PREDICATE = 0x100
    QUERY = 0x200
    REFERENCE = 0x400
    SIGNATURE = 0x800
    CONSTRUCTOR = 0x1000
    SIGNATURE_PARAMETER = 0x2000
    LITERAL = 0x4000
    TUPLE = 0x8000
    TYPE_OPERATOR = 0x10000
    TYPE_PARAMETER = 0x20000
    UNION = 0x40000
    UNKNOWN = 0x80000
    MAPPED = 0x100000
    TUPLE_MEMBER = 0x200000
    OPTIONAL = 0x400000


REFLECTION_KIND_ALL = ReflectionKind(ReflectionKind.REFERENCE * 2 - 1)
TYPE_KIND_ALL = TypeKind(TypeKind.OPTIONAL * 2 - 1)

# Kinds that may appear directly inside a module or namespace.
TOP_LEVEL_KINDS = (
    ReflectionKind.MODULE
    | ReflectionKind.NAMESPACE
    | ReflectionKind.ENUM
    | ReflectionKind.VARIABLE
    | ReflectionKind.FUNCTION
    | ReflectionKind.CLASS
    | ReflectionKind.INTERFACE
    | ReflectionKind.OBJECT
    | ReflectionKind.ALIAS
    | ReflectionKind.REFERENCE
)

MEMBER_KINDS = ReflectionKind.PROPERTY | ReflectionKind.ACCESSOR | ReflectionKind.METHOD

# Kinds whose reflections live in type space for reference resolution.
TYPE_SPACE_KINDS = (
    ReflectionKind.INTERFACE
    | ReflectionKind.CLASS
    | ReflectionKind.ENUM
    | ReflectionKind.ALIAS
    | ReflectionKind.MODULE
)


def to_kind_list(mask: int, kind_type: type[IntFlag] = ReflectionKind) -> list[IntFlag]:
    """Split a kind mask into its single-bit kinds, lowest bit first."""
    kinds = []
    bit = 1
    while bit <= mask:
        if mask & bit:
            kinds.append(kind_type(bit))
        bit <<= 1
    return kinds


def kind_string(kind: int, kind_type: type[IntFlag] = ReflectionKind) -> str:
    """camelCase name of a single kind, e.g. ENUM_MEMBER -> "enumMember".

    Raises:
        ModelError: If ``kind`` is not exactly one bit.
    """
    if kind <= 0 or kind & (kind - 1):
        raise ModelError.invalid_kind_value(int(kind))
    name = kind_type(kind).name
    if name is None:
        raise ModelError.invalid_kind_value(int(kind))
    head, *rest = name.lower().split("_")
    return head + "".join(part.capitalize() for part in rest)


def kind_from_string(name: str, kind_type: type[IntFlag] = ReflectionKind) -> IntFlag | None:
    """Inverse of kind_string. Returns None for unknown names."""
    for member in kind_type:
        if kind_string(member, kind_type) == name:
            return member
    return None
