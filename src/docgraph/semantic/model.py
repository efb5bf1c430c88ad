"""Query contract over an external semantic program model.

The converter consumes symbols, declarations and checked types through the
``SemanticModel`` protocol and never mutates them. The value types below are
deliberately close to what a compiler front-end exposes: a Symbol groups the
Declarations that share one name, a Declaration is one syntactic occurrence,
a TypeNode is a type as written and a ResolvedType is a type as the checker
understands it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntFlag
from typing import Protocol, Union, runtime_checkable

ConstantValue = Union[str, int, float]


class SymbolFlags(IntFlag):
    NONE = 0
    ALIAS = 0x1
    OPTIONAL = 0x2
    CONST_ENUM = 0x4
    TYPE_PARAMETER = 0x8


class DeclarationKind(str, Enum):
    SOURCE_FILE = "source_file"
    CLASS = "class"
    INTERFACE = "interface"
    FUNCTION = "function"
    METHOD = "method"
    METHOD_SIGNATURE = "method_signature"
    PROPERTY = "property"
    PROPERTY_SIGNATURE = "property_signature"
    GET_ACCESSOR = "get_accessor"
    SET_ACCESSOR = "set_accessor"
    PARAMETER = "parameter"
    ENUM = "enum"
    ENUM_MEMBER = "enum_member"
    NAMESPACE = "namespace"
    TYPE_ALIAS = "type_alias"
    VARIABLE = "variable"
    CALL_SIGNATURE = "call_signature"
    CONSTRUCT_SIGNATURE = "construct_signature"
    CONSTRUCTOR = "constructor"
    ARROW_FUNCTION = "arrow_function"
    TYPE_PARAMETER = "type_parameter"
    EXPORT_SPECIFIER = "export_specifier"


SIGNATURE_DECLARATION_KINDS = frozenset(
    {
        DeclarationKind.FUNCTION,
        DeclarationKind.METHOD,
        DeclarationKind.METHOD_SIGNATURE,
        DeclarationKind.CALL_SIGNATURE,
        DeclarationKind.CONSTRUCT_SIGNATURE,
        DeclarationKind.CONSTRUCTOR,
        DeclarationKind.ARROW_FUNCTION,
    }
)


class TypeNodeKind(str, Enum):
    ARRAY = "array"
    CONDITIONAL = "conditional"
    CONSTRUCTOR = "constructor"
    EXPRESSION_WITH_TYPE_ARGUMENTS = "expression_with_type_arguments"
    FUNCTION = "function"
    INDEXED_ACCESS = "indexed_access"
    INFER = "infer"
    INTERSECTION = "intersection"
    KEYWORD = "keyword"
    LITERAL = "literal"
    MAPPED = "mapped"
    NAMED_TUPLE_MEMBER = "named_tuple_member"
    OPTIONAL = "optional"
    PARENTHESIZED = "parenthesized"
    PREDICATE = "predicate"
    QUERY = "query"
    REFERENCE = "reference"
    THIS = "this"
    TUPLE = "tuple"
    TYPE_LITERAL = "type_literal"
    TYPE_OPERATOR = "type_operator"
    UNION = "union"


class TypeFlags(IntFlag):
    NONE = 0
    ANY = 0x1
    UNKNOWN = 0x2
    STRING = 0x4
    NUMBER = 0x8
    BOOLEAN = 0x10
    BIGINT = 0x20
    VOID = 0x40
    UNDEFINED = 0x80
    NULL = 0x100
    NEVER = 0x200
    STRING_LITERAL = 0x400
    NUMBER_LITERAL = 0x800
    BOOLEAN_LITERAL = 0x1000
    BIGINT_LITERAL = 0x2000
    UNION = 0x4000
    INTERSECTION = 0x8000
    CONDITIONAL = 0x10000
    TYPE_PARAMETER = 0x20000
    OBJECT = 0x40000
    ES_SYMBOL = 0x80000

    LITERAL = STRING_LITERAL | NUMBER_LITERAL | BOOLEAN_LITERAL | BIGINT_LITERAL


@dataclass(eq=False)
class Symbol:
    """A named semantic entity. Compared and hashed by identity."""

    name: str
    flags: SymbolFlags = SymbolFlags.NONE
    declarations: list[Declaration] = field(default_factory=list)
    members: dict[str, Symbol] = field(default_factory=dict)
    exports: dict[str, Symbol] = field(default_factory=dict)
    aliased: Symbol | None = field(default=None, repr=False)
    value_declaration: Declaration | None = field(default=None, repr=False)

    @property
    def is_alias(self) -> bool:
        return bool(self.flags & SymbolFlags.ALIAS)


@dataclass(eq=False)
class HeritageClause:
    token: str  # "extends" or "implements"
    types: list[TypeNode] = field(default_factory=list)


@dataclass(eq=False)
class Declaration:
    """One syntactic declaration of a symbol."""

    kind: DeclarationKind
    name: str = ""
    source_file: str = ""
    symbol: Symbol | None = field(default=None, repr=False)
    has_body: bool = False
    type_node: TypeNode | None = None
    resolved_type: ResolvedType | None = field(default=None, repr=False)
    initializer: str | None = None
    arrow_function: Declaration | None = field(default=None, repr=False)
    modifiers: frozenset[str] = frozenset()
    question_token: bool = False
    dot_dot_dot_token: bool = False
    parameters: list[Declaration] = field(default_factory=list)
    type_parameters: list[Declaration] = field(default_factory=list)
    constraint: TypeNode | None = None
    default: TypeNode | None = None
    heritage: list[HeritageClause] = field(default_factory=list)
    comments: list[str] = field(default_factory=list)
    constant_value: ConstantValue | None = None
    signature: Signature | None = field(default=None, repr=False)

    def has_modifier(self, modifier: str) -> bool:
        return modifier in self.modifiers

    def heritage_types(self, token: str) -> list[TypeNode]:
        for clause in self.heritage:
            if clause.token == token:
                return clause.types
        return []


@dataclass(eq=False)
class TypeNode:
    """A type expression as written in source."""

    kind: TypeNodeKind
    text: str = ""
    name: str = ""
    symbol: Symbol | None = field(default=None, repr=False)
    element: TypeNode | None = None
    types: list[TypeNode] = field(default_factory=list)
    type_arguments: list[TypeNode] = field(default_factory=list)
    check_type: TypeNode | None = None
    extends_type: TypeNode | None = None
    true_type: TypeNode | None = None
    false_type: TypeNode | None = None
    object_type: TypeNode | None = None
    index_type: TypeNode | None = None
    operator: str = ""
    value: str | int | float | bool | None = None
    bigint: bool = False
    asserts: bool = False
    optional: bool = False
    parameters: list[Declaration] = field(default_factory=list)
    type_parameters: list[Declaration] = field(default_factory=list)
    return_type: TypeNode | None = None
    members: list[Declaration] = field(default_factory=list)
    readonly_modifier: str = "none"
    optional_modifier: str = "none"
    resolved_type: ResolvedType | None = field(default=None, repr=False)


@dataclass(eq=False)
class Signature:
    """A checked call signature."""

    declaration: Declaration | None
    parameters: list[Symbol] = field(default_factory=list)
    type_parameters: list[ResolvedType] = field(default_factory=list)
    return_type: ResolvedType | None = None


@dataclass(eq=False)
class ResolvedType:
    """A type as the checker resolved it."""

    flags: TypeFlags
    display: str = ""
    name: str = ""
    value: str | int | float | bool | None = None
    negative: bool = False
    symbol: Symbol | None = field(default=None, repr=False)
    alias_symbol: Symbol | None = field(default=None, repr=False)
    alias_type_arguments: list[ResolvedType] = field(default_factory=list)
    types: list[ResolvedType] = field(default_factory=list)
    element_type: ResolvedType | None = None
    is_array: bool = False
    is_tuple: bool = False
    check_type: ResolvedType | None = None
    extends_type: ResolvedType | None = None
    true_type: ResolvedType | None = None
    false_type: ResolvedType | None = None
    properties: list[Symbol] = field(default_factory=list)
    call_signatures: list[Signature] = field(default_factory=list)
    construct_signatures: list[Signature] = field(default_factory=list)
    constraint: ResolvedType | None = None
    default: ResolvedType | None = None

    def has_flag(self, flag: TypeFlags) -> bool:
        return bool(self.flags & flag)


@runtime_checkable
class SemanticModel(Protocol):
    """Pure queries the converter issues against a program."""

    @property
    def name(self) -> str: ...

    @property
    def root_dir(self) -> str: ...

    def entry_files(self) -> list[Declaration]: ...

    def get_source_file(self, path: str) -> Declaration | None: ...

    def get_source_file_symbol(self, source_file: Declaration) -> Symbol | None: ...

    def get_exports_of_module(self, module_symbol: Symbol) -> list[Symbol]: ...

    def get_declarations(self, symbol: Symbol) -> list[Declaration]: ...

    def get_aliased_symbol(self, symbol: Symbol) -> Symbol: ...

    def get_symbol_at_location(self, node: TypeNode) -> Symbol | None: ...

    def get_type_at_location(self, node: Declaration | TypeNode) -> ResolvedType | None: ...

    def get_type_of_symbol(self, symbol: Symbol) -> ResolvedType | None: ...

    def get_signature_from_declaration(self, declaration: Declaration) -> Signature | None: ...

    def get_constant_value(self, declaration: Declaration) -> ConstantValue | None: ...

    def type_to_string(self, type: ResolvedType) -> str: ...
