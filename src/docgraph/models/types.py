"""Structural type expressions.

Types describe the shape of a value. They are plain trees: they are never
registered with the project and carry no identity. The one exception to
"plain" is ReferenceType, which resolves its target lazily through the
project registry.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar, Union

from docgraph.models.kinds import TYPE_SPACE_KINDS, TypeKind

if TYPE_CHECKING:
    from docgraph.models.project import ProjectReflection
    from docgraph.models.reflections import Reflection
    from docgraph.semantic.model import Symbol
    from docgraph.serialization.serializer import Serializer

T = TypeVar("T", bound="Type")


def wrap(wrapped: bool, text: str) -> str:
    return f"({text})" if wrapped else text


def cloned(types: Sequence[T]) -> list[T]:
    return [t.clone() for t in types]


class Type:
    """Base of every type expression."""

    kind: TypeKind

    def clone(self) -> Type:
        raise NotImplementedError

    def stringify(self, wrapped: bool) -> str:
        """Display form. ``wrapped`` asks complex types to parenthesize themselves."""
        raise NotImplementedError

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        """Kind-specific fields of the JSON projection."""
        return {}

    def __str__(self) -> str:
        return self.stringify(False)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.stringify(False)!r})"


# =============================================================================
# Leaf types
# =============================================================================


class IntrinsicType(Type):
    """A built-in type such as ``string`` or ``void``."""

    kind = TypeKind.INTRINSIC

    def __init__(self, name: str) -> None:
        self.name = name

    def clone(self) -> IntrinsicType:
        return IntrinsicType(self.name)

    def stringify(self, wrapped: bool) -> str:
        return self.name

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {"name": self.name}


class UnknownType(Type):
    """Fallback for anything conversion could not represent; keeps the display text."""

    kind = TypeKind.UNKNOWN

    def __init__(self, name: str) -> None:
        self.name = name

    def clone(self) -> UnknownType:
        return UnknownType(self.name)

    def stringify(self, wrapped: bool) -> str:
        return self.name

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {"name": self.name}


class InferredType(Type):
    """``infer U`` inside a conditional type."""

    kind = TypeKind.INFERRED

    def __init__(self, name: str) -> None:
        self.name = name

    def clone(self) -> InferredType:
        return InferredType(self.name)

    def stringify(self, wrapped: bool) -> str:
        return wrap(wrapped, f"infer {self.name}")

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {"name": self.name}


@dataclass(frozen=True)
class BigIntLiteral:
    """A bigint literal kept as base-10 digits plus sign."""

    value: str
    negative: bool = False

    def __str__(self) -> str:
        return f"{'-' if self.negative else ''}{self.value}n"


LiteralValue = Union[str, int, float, bool, None, BigIntLiteral]


class LiteralType(Type):
    """A literal type: ``"a"``, ``1``, ``true``, ``null`` or a bigint."""

    kind = TypeKind.LITERAL

    def __init__(self, value: LiteralValue) -> None:
        self.value = value

    def clone(self) -> LiteralType:
        return LiteralType(self.value)

    def stringify(self, wrapped: bool) -> str:
        value = self.value
        if isinstance(value, str):
            return json.dumps(value)
        if isinstance(value, bool):
            return "true" if value else "false"
        if value is None:
            return "null"
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        if isinstance(self.value, BigIntLiteral):
            return {"value": {"value": self.value.value, "negative": self.value.negative}}
        return {"value": self.value}


# =============================================================================
# Composite types
# =============================================================================


class ArrayType(Type):
    kind = TypeKind.ARRAY

    def __init__(self, element_type: Type) -> None:
        self.element_type = element_type

    def clone(self) -> ArrayType:
        return ArrayType(self.element_type.clone())

    def stringify(self, wrapped: bool) -> str:
        return self.element_type.stringify(True) + "[]"

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {"elementType": serializer.to_object(self.element_type)}


class UnionType(Type):
    kind = TypeKind.UNION

    def __init__(self, types: list[Type]) -> None:
        self.types = types

    def clone(self) -> UnionType:
        return UnionType(cloned(self.types))

    def stringify(self, wrapped: bool) -> str:
        return wrap(wrapped, " | ".join(t.stringify(True) for t in self.types))

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {"types": serializer.to_object(self.types)}


class IntersectionType(Type):
    kind = TypeKind.INTERSECTION

    def __init__(self, types: list[Type]) -> None:
        self.types = types

    def clone(self) -> IntersectionType:
        return IntersectionType(cloned(self.types))

    def stringify(self, wrapped: bool) -> str:
        return wrap(wrapped, " & ".join(t.stringify(True) for t in self.types))

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {"types": serializer.to_object(self.types)}


class ConditionalType(Type):
    """``Check extends Extends ? True : False``"""

    kind = TypeKind.CONDITIONAL

    def __init__(self, check_type: Type, extends_type: Type, true_type: Type, false_type: Type) -> None:
        self.check_type = check_type
        self.extends_type = extends_type
        self.true_type = true_type
        self.false_type = false_type

    def clone(self) -> ConditionalType:
        return ConditionalType(
            self.check_type.clone(),
            self.extends_type.clone(),
            self.true_type.clone(),
            self.false_type.clone(),
        )

    def stringify(self, wrapped: bool) -> str:
        return wrap(
            wrapped,
            f"{self.check_type.stringify(True)} extends {self.extends_type.stringify(True)}"
            f" ? {self.true_type.stringify(True)} : {self.false_type.stringify(True)}",
        )

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {
            "checkType": serializer.to_object(self.check_type),
            "extendsType": serializer.to_object(self.extends_type),
            "trueType": serializer.to_object(self.true_type),
            "falseType": serializer.to_object(self.false_type),
        }


class IndexedAccessType(Type):
    """``T["key"]``"""

    kind = TypeKind.INDEXED_ACCESS

    def __init__(self, object_type: Type, index_type: Type) -> None:
        self.object_type = object_type
        self.index_type = index_type

    def clone(self) -> IndexedAccessType:
        return IndexedAccessType(self.object_type.clone(), self.index_type.clone())

    def stringify(self, wrapped: bool) -> str:
        return f"{self.object_type.stringify(True)}[{self.index_type.stringify(False)}]"

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {
            "objectType": serializer.to_object(self.object_type),
            "indexType": serializer.to_object(self.index_type),
        }


class TypeOperatorType(Type):
    """``keyof T``, ``readonly T[]`` or ``unique symbol``."""

    kind = TypeKind.TYPE_OPERATOR

    def __init__(self, target: Type, operator: str) -> None:
        self.target = target
        self.operator = operator

    def clone(self) -> TypeOperatorType:
        return TypeOperatorType(self.target.clone(), self.operator)

    def stringify(self, wrapped: bool) -> str:
        return f"{self.operator} {self.target.stringify(False)}"

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {"operator": self.operator, "target": serializer.to_object(self.target)}


class OptionalType(Type):
    """An optional tuple element, ``[string?]``."""

    kind = TypeKind.OPTIONAL

    def __init__(self, element_type: Type) -> None:
        self.element_type = element_type

    def clone(self) -> OptionalType:
        return OptionalType(self.element_type.clone())

    def stringify(self, wrapped: bool) -> str:
        return self.element_type.stringify(True) + "?"

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {"elementType": serializer.to_object(self.element_type)}


class TupleType(Type):
    kind = TypeKind.TUPLE

    def __init__(self, elements: list[Type]) -> None:
        self.elements = elements

    def clone(self) -> TupleType:
        return TupleType(cloned(self.elements))

    def stringify(self, wrapped: bool) -> str:
        return "[" + ", ".join(t.stringify(False) for t in self.elements) + "]"

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {"elements": serializer.to_object(self.elements)}


class TupleMemberType(Type):
    """A named tuple element, ``[name?: string]``."""

    kind = TypeKind.TUPLE_MEMBER

    def __init__(self, name: str, is_optional: bool, element_type: Type) -> None:
        self.name = name
        self.is_optional = is_optional
        self.element_type = element_type

    def clone(self) -> TupleMemberType:
        return TupleMemberType(self.name, self.is_optional, self.element_type.clone())

    def stringify(self, wrapped: bool) -> str:
        return f"{self.name}{'?' if self.is_optional else ''}: {self.element_type}"

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {
            "name": self.name,
            "isOptional": self.is_optional,
            "elementType": serializer.to_object(self.element_type),
        }


class PredicateType(Type):
    """``x is T`` or ``asserts x is T``."""

    kind = TypeKind.PREDICATE

    def __init__(self, name: str, asserts: bool, target_type: Type | None = None) -> None:
        self.name = name
        self.asserts = asserts
        self.target_type = target_type

    def clone(self) -> PredicateType:
        return PredicateType(
            self.name, self.asserts, self.target_type.clone() if self.target_type else None
        )

    def stringify(self, wrapped: bool) -> str:
        out = ["asserts", self.name] if self.asserts else [self.name]
        if self.target_type is not None:
            out.extend(["is", self.target_type.stringify(False)])
        return " ".join(out)

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "asserts": self.asserts}
        if self.target_type is not None:
            result["targetType"] = serializer.to_object(self.target_type)
        return result


class TypeParameterType(Type):
    """``T extends Constraint = Default``"""

    kind = TypeKind.TYPE_PARAMETER

    def __init__(
        self, name: str, constraint: Type | None = None, default_type: Type | None = None
    ) -> None:
        self.name = name
        self.constraint = constraint
        self.default_type = default_type

    def clone(self) -> TypeParameterType:
        return TypeParameterType(
            self.name,
            self.constraint.clone() if self.constraint else None,
            self.default_type.clone() if self.default_type else None,
        )

    def stringify(self, wrapped: bool) -> str:
        extends_clause = f" extends {self.constraint}" if self.constraint else ""
        default_clause = f" = {self.default_type}" if self.default_type else ""
        return self.name + extends_clause + default_clause

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.constraint is not None:
            result["constraint"] = serializer.to_object(self.constraint)
        if self.default_type is not None:
            result["default"] = serializer.to_object(self.default_type)
        return result


class OptionalModifier(str, Enum):
    NONE = "none"
    ADD = "add"
    REMOVE = "remove"


class MappedType(Type):
    """``{ readonly [K in Keys]?: T }``"""

    kind = TypeKind.MAPPED

    _READONLY_PREFIX = {
        OptionalModifier.NONE: " ",
        OptionalModifier.ADD: " readonly ",
        OptionalModifier.REMOVE: " -readonly ",
    }
    _OPTIONAL_SEPARATOR = {
        OptionalModifier.NONE: ": ",
        OptionalModifier.ADD: "?: ",
        OptionalModifier.REMOVE: "-?: ",
    }

    def __init__(
        self,
        readonly_modifier: OptionalModifier,
        parameter: TypeParameterType,
        optional_modifier: OptionalModifier,
        template_type: Type,
    ) -> None:
        self.readonly_modifier = readonly_modifier
        self.parameter = parameter
        self.optional_modifier = optional_modifier
        self.template_type = template_type

    def clone(self) -> MappedType:
        return MappedType(
            self.readonly_modifier,
            self.parameter.clone(),
            self.optional_modifier,
            self.template_type.clone(),
        )

    def stringify(self, wrapped: bool) -> str:
        prefix = self._READONLY_PREFIX[self.readonly_modifier]
        constraint = self.parameter.constraint
        parameter = f"{self.parameter.name} in {constraint}" if constraint else self.parameter.name
        sep = self._OPTIONAL_SEPARATOR[self.optional_modifier]
        return f"{{{prefix}[{parameter}]{sep}{self.template_type} }}"

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {
            "readonlyModifier": self.readonly_modifier.value,
            "parameter": serializer.to_object(self.parameter),
            "optionalModifier": self.optional_modifier.value,
            "templateType": serializer.to_object(self.template_type),
        }


# =============================================================================
# Signatures and objects
# =============================================================================


class SignatureParameterType(Type):
    """One parameter of a signature type: ``...name?: T``."""

    kind = TypeKind.SIGNATURE_PARAMETER

    def __init__(self, name: str, is_optional: bool, is_rest: bool, parameter_type: Type) -> None:
        self.name = name
        self.is_optional = is_optional
        self.is_rest = is_rest
        self.parameter_type = parameter_type

    def clone(self) -> SignatureParameterType:
        return SignatureParameterType(
            self.name, self.is_optional, self.is_rest, self.parameter_type.clone()
        )

    def stringify(self, wrapped: bool) -> str:
        rest = "..." if self.is_rest else ""
        optional = "?" if self.is_optional else ""
        return f"{rest}{self.name}{optional}: {self.parameter_type}"

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {
            "name": self.name,
            "isOptional": self.is_optional,
            "isRest": self.is_rest,
            "parameterType": serializer.to_object(self.parameter_type),
        }


class SignatureType(Type):
    """A call signature: ``<T>(a: T) => T``."""

    kind = TypeKind.SIGNATURE
    _prefix = ""

    def __init__(
        self,
        type_parameters: list[TypeParameterType],
        parameters: list[SignatureParameterType],
        return_type: Type,
    ) -> None:
        self.type_parameters = type_parameters
        self.parameters = parameters
        self.return_type = return_type

    def clone(self) -> SignatureType:
        return type(self)(cloned(self.type_parameters), cloned(self.parameters), self.return_type.clone())

    def stringify(self, wrapped: bool, use_arrow: bool = True) -> str:
        """``use_arrow=False`` renders the member form used inside object literals."""
        type_parameters = ", ".join(str(tp) for tp in self.type_parameters)
        parameters = ", ".join(str(p) for p in self.parameters)
        return_indicator = " => " if use_arrow else ": "
        head = f"<{type_parameters}>" if type_parameters else ""
        text = f"{self._prefix}{head}({parameters}){return_indicator}{self.return_type}"
        return wrap(wrapped and use_arrow, text)

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {
            "typeParameters": serializer.to_object(self.type_parameters),
            "parameters": serializer.to_object(self.parameters),
            "returnType": serializer.to_object(self.return_type),
        }


class ConstructorType(SignatureType):
    """A construct signature: ``new (a: string) => Foo``."""

    kind = TypeKind.CONSTRUCTOR
    _prefix = "new "


class PropertyType(Type):
    """A property of an object type: ``readonly name?: T``."""

    kind = TypeKind.PROPERTY

    def __init__(self, name: str, is_readonly: bool, is_optional: bool, property_type: Type) -> None:
        self.name = name
        self.is_readonly = is_readonly
        self.is_optional = is_optional
        self.property_type = property_type

    def clone(self) -> PropertyType:
        return PropertyType(self.name, self.is_readonly, self.is_optional, self.property_type.clone())

    def stringify(self, wrapped: bool) -> str:
        front = "readonly " if self.is_readonly else ""
        tail = "?" if self.is_optional else ""
        return f"{front}{self.name}{tail}: {self.property_type}"

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {
            "name": self.name,
            "isReadonly": self.is_readonly,
            "isOptional": self.is_optional,
            "propertyType": serializer.to_object(self.property_type),
        }


class ObjectType(Type):
    """Properties plus call and construct signatures."""

    kind = TypeKind.OBJECT

    def __init__(
        self,
        properties: list[PropertyType],
        signatures: list[SignatureType],
        construct_signatures: list[ConstructorType],
    ) -> None:
        self.properties = properties
        self.signatures = signatures
        self.construct_signatures = construct_signatures

    def clone(self) -> ObjectType:
        return ObjectType(
            cloned(self.properties), cloned(self.signatures), cloned(self.construct_signatures)
        )

    def stringify(self, wrapped: bool) -> str:
        if not self.properties and not self.construct_signatures and len(self.signatures) == 1:
            return self.signatures[0].stringify(wrapped)
        if not self.properties and not self.signatures and len(self.construct_signatures) == 1:
            return self.construct_signatures[0].stringify(wrapped)

        members = [
            *(prop.stringify(False) for prop in self.properties),
            *(sig.stringify(False, use_arrow=False) for sig in self.signatures),
            *(sig.stringify(False, use_arrow=False) for sig in self.construct_signatures),
        ]
        return "{ " + "; ".join(members) + " }"

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {
            "properties": serializer.to_object(self.properties),
            "signatures": serializer.to_object(self.signatures),
            "constructSignatures": serializer.to_object(self.construct_signatures),
        }


# =============================================================================
# References
# =============================================================================


class ReferenceType(Type):
    """A named type that may point at a reflection of the project.

    The target is either a reflection id or a semantic symbol. Symbol targets
    are resolved on first access and the chosen id is cached, so later lookups
    are stable. Resolution never raises: a removed or never-created target
    simply resolves to ``None``.
    """

    kind = TypeKind.REFERENCE

    def __init__(
        self,
        name: str,
        type_arguments: list[Type],
        reference: Symbol | Reflection | int,
        prefer_value_space: bool,
        project: ProjectReflection,
    ) -> None:
        from docgraph.models.reflections import Reflection

        self.name = name
        self.type_arguments = type_arguments
        self._reference: Symbol | int = (
            reference.id if isinstance(reference, Reflection) else reference
        )
        self._prefer_value_space = prefer_value_space
        self._project = project

    @property
    def prefer_value_space(self) -> bool:
        return self._prefer_value_space

    @property
    def reflection(self) -> Reflection | None:
        if isinstance(self._reference, int):
            return self._project.get_by_id(self._reference)

        candidates = self._project.get_by_symbol(self._reference)
        for reflection in candidates:
            if self._prefer_value_space != reflection.kind_of(TYPE_SPACE_KINDS):
                self._reference = reflection.id
                return reflection
        # No reflection lives in the preferred space; take the first one registered.
        for reflection in candidates:
            self._reference = reflection.id
            return reflection
        return None

    def clone(self) -> ReferenceType:
        return ReferenceType(
            self.name,
            cloned(self.type_arguments),
            self._reference,
            self._prefer_value_space,
            self._project,
        )

    def stringify(self, wrapped: bool) -> str:
        target = self.reflection
        name = target.name if target is not None else self.name
        if self.type_arguments:
            return name + "<" + ", ".join(str(arg) for arg in self.type_arguments) + ">"
        return name

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "typeArguments": serializer.to_object(self.type_arguments),
        }
        target = self.reflection
        if target is not None:
            result["target"] = target.id
        return result


class QueryType(Type):
    """``typeof value``"""

    kind = TypeKind.QUERY

    def __init__(self, query_type: ReferenceType) -> None:
        self.query_type = query_type

    def clone(self) -> QueryType:
        return QueryType(self.query_type.clone())

    def stringify(self, wrapped: bool) -> str:
        return f"typeof {self.query_type}"

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {"queryType": serializer.to_object(self.query_type)}


SomeType = Union[
    ArrayType,
    ConditionalType,
    ConstructorType,
    IndexedAccessType,
    InferredType,
    IntersectionType,
    IntrinsicType,
    LiteralType,
    MappedType,
    ObjectType,
    OptionalType,
    PredicateType,
    PropertyType,
    QueryType,
    ReferenceType,
    SignatureParameterType,
    SignatureType,
    TupleMemberType,
    TupleType,
    TypeOperatorType,
    TypeParameterType,
    UnionType,
    UnknownType,
]
