"""Reflection and type data model."""

from docgraph.models.comments import Comment, CommentTag
from docgraph.models.flags import ReflectionFlag, ReflectionFlags
from docgraph.models.ids import IdAllocator
from docgraph.models.kinds import (
    REFLECTION_KIND_ALL,
    TYPE_KIND_ALL,
    ReflectionKind,
    TypeKind,
    kind_from_string,
    kind_string,
    to_kind_list,
)
from docgraph.models.project import ProjectReflection
from docgraph.models.reflections import (
    AccessorReflection,
    CallableReflection,
    ClassReflection,
    ContainerReflection,
    EnumMemberReflection,
    EnumReflection,
    FunctionReflection,
    InterfaceReflection,
    MethodReflection,
    ModuleReflection,
    NamespaceReflection,
    ObjectReflection,
    ParameterReflection,
    PropertyReflection,
    Reflection,
    ReferenceReflection,
    SignatureReflection,
    TypeAliasReflection,
    VariableReflection,
    Visibility,
)
from docgraph.models.types import (
    ArrayType,
    BigIntLiteral,
    ConditionalType,
    ConstructorType,
    IndexedAccessType,
    InferredType,
    IntersectionType,
    IntrinsicType,
    LiteralType,
    MappedType,
    ObjectType,
    OptionalModifier,
    OptionalType,
    PredicateType,
    PropertyType,
    QueryType,
    ReferenceType,
    SignatureParameterType,
    SignatureType,
    SomeType,
    TupleMemberType,
    TupleType,
    Type,
    TypeOperatorType,
    TypeParameterType,
    UnionType,
    UnknownType,
)

__all__ = [
    # Comments
    "Comment",
    "CommentTag",
    # Kinds and flags
    "REFLECTION_KIND_ALL",
    "TYPE_KIND_ALL",
    "ReflectionKind",
    "TypeKind",
    "ReflectionFlag",
    "ReflectionFlags",
    "kind_from_string",
    "kind_string",
    "to_kind_list",
    # Identity
    "IdAllocator",
    "ProjectReflection",
    # Reflections
    "AccessorReflection",
    "CallableReflection",
    "ClassReflection",
    "ContainerReflection",
    "EnumMemberReflection",
    "EnumReflection",
    "FunctionReflection",
    "InterfaceReflection",
    "MethodReflection",
    "ModuleReflection",
    "NamespaceReflection",
    "ObjectReflection",
    "ParameterReflection",
    "PropertyReflection",
    "Reflection",
    "ReferenceReflection",
    "SignatureReflection",
    "TypeAliasReflection",
    "VariableReflection",
    "Visibility",
    # Types
    "ArrayType",
    "BigIntLiteral",
    "ConditionalType",
    "ConstructorType",
    "IndexedAccessType",
    "InferredType",
    "IntersectionType",
    "IntrinsicType",
    "LiteralType",
    "MappedType",
    "ObjectType",
    "OptionalModifier",
    "OptionalType",
    "PredicateType",
    "PropertyType",
    "QueryType",
    "ReferenceType",
    "SignatureParameterType",
    "SignatureType",
    "SomeType",
    "TupleMemberType",
    "TupleType",
    "Type",
    "TypeOperatorType",
    "TypeParameterType",
    "UnionType",
    "UnknownType",
]
