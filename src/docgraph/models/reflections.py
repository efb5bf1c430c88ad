"""Reflection tree nodes.

A reflection documents one entity: a module, a class, a function signature and
so on. Reflections form a tree through container reflections. The project
registry (see project.py) is the source of truth for which reflections are
still alive; the tree links are kept consistent by ``add_child`` and
``remove_child``.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from docgraph.core.errors import ModelError
from docgraph.models.flags import ReflectionFlag, ReflectionFlags
from docgraph.models.kinds import (
    MEMBER_KINDS,
    TOP_LEVEL_KINDS,
    ReflectionKind,
    kind_string,
)

if TYPE_CHECKING:
    from docgraph.models.comments import Comment
    from docgraph.models.project import ProjectReflection
    from docgraph.models.types import ReferenceType, Type, TypeParameterType
    from docgraph.serialization.serializer import Serializer


class Visibility(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


_VISIBILITY_FLAGS = {
    Visibility.PUBLIC: ReflectionFlag.PUBLIC,
    Visibility.PROTECTED: ReflectionFlag.PROTECTED,
    Visibility.PRIVATE: ReflectionFlag.PRIVATE,
}


class Reflection:
    """Base class of every reflection.

    Attributes:
        id: Run-scoped id, fixed at construction.
        kind: Single-bit ReflectionKind.
        flags: Modifier flags.
        comment: Parsed doc comment, attached right after creation.
    """

    kind: ClassVar[ReflectionKind]

    # Dependent reflections (signatures, parameters) are owned by another
    # reflection and never registered with the project on their own.
    dependent: ClassVar[bool] = False

    def __init__(self, id: int, name: str) -> None:
        self.id = id
        self._name = name
        self._original_name: str | None = None
        self.flags = ReflectionFlags()
        self.comment: Comment | None = None
        self._parent: Reflection | None = None
        self._project: ProjectReflection | None = None

    # -------------------------------------------------------------------------
    # Naming
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        if value != self._name and self._original_name is None:
            self._original_name = self._name
        self._name = value

    @property
    def original_name(self) -> str:
        return self._original_name if self._original_name is not None else self._name

    @property
    def is_renamed(self) -> bool:
        return self._original_name is not None and self._original_name != self._name

    @property
    def kind_string(self) -> str:
        return kind_string(self.kind)

    def get_full_name(self, separator: str = ".") -> str:
        """Dotted path from the top module down to this reflection."""
        parts = [self.name]
        parent = self._parent
        while parent is not None and parent.kind != ReflectionKind.PROJECT:
            parts.append(parent.name)
            parent = parent._parent
        return separator.join(reversed(parts))

    # -------------------------------------------------------------------------
    # Tree links
    # -------------------------------------------------------------------------

    @property
    def parent(self) -> Reflection | None:
        return self._parent

    @parent.setter
    def parent(self, value: Reflection | None) -> None:
        self._parent = value
        self._project = None

    @property
    def project(self) -> ProjectReflection | None:
        if self._project is None and self._parent is not None:
            self._project = self._parent.project
        return self._project

    def kind_of(self, *kinds: int) -> bool:
        """True if this reflection's kind is contained in any of the given masks."""
        return any(self.kind & kind for kind in kinds)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        """Kind-specific fields of the JSON projection."""
        return {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id}, name={self.name!r})"


class ContainerReflection(Reflection):
    """A reflection owning an ordered list of children of a constrained kind."""

    child_kinds: ClassVar[ReflectionKind]

    def __init__(self, id: int, name: str) -> None:
        super().__init__(id, name)
        self.children: list[Reflection] = []

    def add_child(self, child: Reflection) -> None:
        if child.parent is not None:
            raise ModelError.already_contained(repr(child), repr(self))
        if not child.kind_of(self.child_kinds):
            raise ModelError.invalid_child_kind(child.name, child.kind_string, repr(self))
        self.children.append(child)
        child.parent = self

    def remove_child(self, child: Reflection) -> None:
        if child.parent is not self or child not in self.children:
            raise ModelError.not_a_child(repr(child), repr(self))
        self.children.remove(child)
        child.parent = None

    def get_child_by_name(self, name: str) -> Reflection | None:
        for child in self.children:
            if child.name == name:
                return child
        return None

    def __iter__(self) -> Iterator[Reflection]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)


# =============================================================================
# Top-level containers
# =============================================================================


class ModuleReflection(ContainerReflection):
    """One entry file."""

    kind = ReflectionKind.MODULE
    child_kinds = TOP_LEVEL_KINDS


class NamespaceReflection(ContainerReflection):
    kind = ReflectionKind.NAMESPACE
    child_kinds = TOP_LEVEL_KINDS


class EnumReflection(ContainerReflection):
    kind = ReflectionKind.ENUM
    child_kinds = ReflectionKind.ENUM_MEMBER

    def __init__(self, id: int, name: str, is_const: bool = False) -> None:
        super().__init__(id, name)
        self.flags.set_flag(ReflectionFlag.CONST, is_const)

    @property
    def is_const(self) -> bool:
        return self.flags.is_const


class EnumMemberReflection(Reflection):
    kind = ReflectionKind.ENUM_MEMBER

    def __init__(self, id: int, name: str, value: str | int | float) -> None:
        super().__init__(id, name)
        self.value = value

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {"value": self.value}


class _SignatureHolder(ContainerReflection):
    """Member container that also carries call and construct signatures."""

    child_kinds = MEMBER_KINDS

    def __init__(
        self,
        id: int,
        name: str,
        signatures: list[SignatureReflection] | None = None,
        construct_signatures: list[SignatureReflection] | None = None,
        type_parameters: list[TypeParameterType] | None = None,
    ) -> None:
        super().__init__(id, name)
        self.signatures = list(signatures or [])
        self.construct_signatures = list(construct_signatures or [])
        self.type_parameters = list(type_parameters or [])
        for signature in (*self.signatures, *self.construct_signatures):
            signature.parent = self

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {
            "signatures": serializer.to_object(self.signatures),
            "constructSignatures": serializer.to_object(self.construct_signatures),
            "typeParameters": serializer.to_object(self.type_parameters),
        }


class ClassReflection(_SignatureHolder):
    kind = ReflectionKind.CLASS

    def __init__(
        self,
        id: int,
        name: str,
        signatures: list[SignatureReflection] | None = None,
        construct_signatures: list[SignatureReflection] | None = None,
        type_parameters: list[TypeParameterType] | None = None,
        implemented_types: list[ReferenceType] | None = None,
        extended_type: Type | None = None,
    ) -> None:
        super().__init__(id, name, signatures, construct_signatures, type_parameters)
        self.implemented_types = list(implemented_types or [])
        self.extended_type = extended_type

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        result = super().serialize(serializer)
        result["implementedTypes"] = serializer.to_object(self.implemented_types)
        if self.extended_type is not None:
            result["extendedType"] = serializer.to_object(self.extended_type)
        return result


class InterfaceReflection(_SignatureHolder):
    kind = ReflectionKind.INTERFACE

    def __init__(
        self,
        id: int,
        name: str,
        signatures: list[SignatureReflection] | None = None,
        construct_signatures: list[SignatureReflection] | None = None,
        type_parameters: list[TypeParameterType] | None = None,
        extended_types: list[Type] | None = None,
    ) -> None:
        super().__init__(id, name, signatures, construct_signatures, type_parameters)
        self.extended_types = list(extended_types or [])

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        result = super().serialize(serializer)
        result["extendedTypes"] = serializer.to_object(self.extended_types)
        return result


class ObjectReflection(_SignatureHolder):
    """An object literal type with documented members."""

    kind = ReflectionKind.OBJECT


# =============================================================================
# Values and members
# =============================================================================


class VariableReflection(Reflection):
    kind = ReflectionKind.VARIABLE

    def __init__(self, id: int, name: str, type: Type, default_value: str | None = None) -> None:
        super().__init__(id, name)
        self.type = type
        self.default_value = default_value

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        result = {"type": serializer.to_object(self.type)}
        if self.default_value is not None:
            result["defaultValue"] = self.default_value
        return result


class TypeAliasReflection(Reflection):
    kind = ReflectionKind.ALIAS

    def __init__(
        self,
        id: int,
        name: str,
        type: Type,
        type_parameters: list[TypeParameterType] | None = None,
    ) -> None:
        super().__init__(id, name)
        self.type = type
        self.type_parameters = list(type_parameters or [])

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {
            "type": serializer.to_object(self.type),
            "typeParameters": serializer.to_object(self.type_parameters),
        }


class _VisibilityMixin:
    """Visibility of a class or interface member, mirrored into the flags."""

    flags: ReflectionFlags
    _visibility: Visibility

    @property
    def visibility(self) -> Visibility:
        return self._visibility

    @visibility.setter
    def visibility(self, value: Visibility) -> None:
        self._visibility = Visibility(value)
        self.flags.set_flag(_VISIBILITY_FLAGS[self._visibility], True)

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        result = super().serialize(serializer)  # type: ignore[misc]
        result["visibility"] = self.visibility.value
        return result


class PropertyReflection(_VisibilityMixin, Reflection):
    kind = ReflectionKind.PROPERTY

    def __init__(
        self,
        id: int,
        name: str,
        type: Type,
        visibility: Visibility = Visibility.PUBLIC,
        default_value: str | None = None,
    ) -> None:
        super().__init__(id, name)
        self.visibility = visibility
        self.type = type
        self.default_value = default_value

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        result = super().serialize(serializer)
        result["type"] = serializer.to_object(self.type)
        if self.default_value is not None:
            result["defaultValue"] = self.default_value
        return result


class AccessorReflection(_VisibilityMixin, Reflection):
    """A get/set accessor pair documented as one dynamic property."""

    kind = ReflectionKind.ACCESSOR

    def __init__(
        self,
        id: int,
        name: str,
        type: Type,
        visibility: Visibility = Visibility.PUBLIC,
        has_getter: bool = False,
        has_setter: bool = False,
    ) -> None:
        super().__init__(id, name)
        self.visibility = visibility
        self.type = type
        self.has_getter = has_getter
        self.has_setter = has_setter

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        result = super().serialize(serializer)
        result["type"] = serializer.to_object(self.type)
        result["hasGetter"] = self.has_getter
        result["hasSetter"] = self.has_setter
        return result


# =============================================================================
# Callables
# =============================================================================


class CallableReflection(Reflection):
    """A function or method: one reflection holding every real overload signature."""

    def __init__(self, id: int, name: str) -> None:
        super().__init__(id, name)
        self.signatures: list[SignatureReflection] = []

    def add_signature(self, signature: SignatureReflection) -> None:
        if signature.parent is not None:
            raise ModelError.already_contained(repr(signature), repr(self))
        self.signatures.append(signature)
        signature.parent = self

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {"signatures": serializer.to_object(self.signatures)}


class FunctionReflection(CallableReflection):
    kind = ReflectionKind.FUNCTION


class MethodReflection(_VisibilityMixin, CallableReflection):
    kind = ReflectionKind.METHOD

    def __init__(self, id: int, name: str, visibility: Visibility = Visibility.PUBLIC) -> None:
        super().__init__(id, name)
        self.visibility = visibility
        self.overwrites: int | None = None
        self.inherited_from: int | None = None
        self.implementation_of: int | None = None

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        result = super().serialize(serializer)
        for key, value in (
            ("overwrites", self.overwrites),
            ("inheritedFrom", self.inherited_from),
            ("implementationOf", self.implementation_of),
        ):
            if value is not None:
                result[key] = value
        return result


class SignatureReflection(Reflection):
    """One call signature. Owned by its callable; owns its parameters."""

    kind = ReflectionKind.SIGNATURE
    dependent = True

    def __init__(
        self,
        id: int,
        name: str,
        return_type: Type,
        parameters: list[ParameterReflection] | None = None,
        type_parameters: list[TypeParameterType] | None = None,
    ) -> None:
        super().__init__(id, name)
        self.return_type = return_type
        self.parameters = list(parameters or [])
        self.type_parameters = list(type_parameters or [])
        for parameter in self.parameters:
            parameter.parent = self

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        return {
            "typeParameters": serializer.to_object(self.type_parameters),
            "parameters": serializer.to_object(self.parameters),
            "returnType": serializer.to_object(self.return_type),
        }


class ParameterReflection(Reflection):
    kind = ReflectionKind.PARAMETER
    dependent = True

    def __init__(
        self,
        id: int,
        name: str,
        type: Type,
        default_value: str | None = None,
        is_optional: bool = False,
        is_rest: bool = False,
    ) -> None:
        super().__init__(id, name)
        self.type = type
        self.default_value = default_value
        self.flags.set_flag(ReflectionFlag.OPTIONAL, is_optional)
        self.flags.set_flag(ReflectionFlag.REST, is_rest)

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        result = {"type": serializer.to_object(self.type)}
        if self.default_value is not None:
            result["defaultValue"] = self.default_value
        return result


# =============================================================================
# References
# =============================================================================


class ReferenceReflection(Reflection):
    """A re-export: a second name for a reflection documented elsewhere.

    A reference to a reference collapses to the final target at construction.
    """

    kind = ReflectionKind.REFERENCE

    def __init__(self, id: int, name: str, target: Reflection | int) -> None:
        super().__init__(id, name)
        if isinstance(target, ReferenceReflection):
            self._target = target._target
        elif isinstance(target, Reflection):
            self._target = target.id
        else:
            self._target = target

    @property
    def target_id(self) -> int:
        return self._target

    def resolve(self) -> Reflection | None:
        """The live target, or None once it has been removed."""
        project = self.project
        if project is None:
            return None
        return project.get_by_id(self._target)

    def serialize(self, serializer: Serializer) -> dict[str, Any]:
        # A broken reference keeps the key so consumers see "unresolved".
        target = self.resolve()
        return {"target": target.id if target is not None else None}

