"""Converters for type expressions as written in source.

Preferred over resolved types whenever a node exists: once only the checked
type is left, an alias like ``type Id = string`` can no longer be told apart
from ``string`` itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from docgraph.converter.registry import TypeNodeConverter
from docgraph.converter.utils import convert_parameters, convert_type_parameters
from docgraph.core.errors import ConversionError
from docgraph.models import types as T
from docgraph.semantic.model import DeclarationKind, TypeNodeKind

if TYPE_CHECKING:
    from docgraph.converter.converter import Converter
    from docgraph.semantic.model import TypeNode


# T[]
def convert_array(converter: Converter, node: TypeNode) -> T.Type:
    return T.ArrayType(converter.convert_type(node.element))


# Check extends Extends ? True : False
def convert_conditional(converter: Converter, node: TypeNode) -> T.Type:
    return T.ConditionalType(
        converter.convert_type(node.check_type),
        converter.convert_type(node.extends_type),
        converter.convert_type(node.true_type),
        converter.convert_type(node.false_type),
    )


def convert_constructor(converter: Converter, node: TypeNode) -> T.Type:
    return T.ConstructorType(
        convert_type_parameters(converter, node.type_parameters),
        convert_parameters(converter, node.parameters),
        converter.convert_type(node.return_type),
    )


# class A extends B<T> {}
def convert_expression_with_type_arguments(converter: Converter, node: TypeNode) -> T.Type:
    symbol = converter.get_symbol_at_location(node)
    # Mixins may not have a symbol here.
    if symbol is None:
        return converter.convert_type(converter.model.get_type_at_location(node))
    arguments = [converter.convert_type(arg) for arg in node.type_arguments]
    return T.ReferenceType(symbol.name, arguments, symbol, False, converter.project)


def convert_function(converter: Converter, node: TypeNode) -> T.Type:
    return T.SignatureType(
        convert_type_parameters(converter, node.type_parameters),
        convert_parameters(converter, node.parameters),
        converter.convert_type(node.return_type),
    )


# T["a"]
def convert_indexed_access(converter: Converter, node: TypeNode) -> T.Type:
    return T.IndexedAccessType(
        converter.convert_type(node.object_type), converter.convert_type(node.index_type)
    )


# T extends infer U ? ...
def convert_infer(converter: Converter, node: TypeNode) -> T.Type:
    return T.InferredType(node.name)


def convert_intersection(converter: Converter, node: TypeNode) -> T.Type:
    return T.IntersectionType([converter.convert_type(t) for t in node.types])


def convert_keyword(converter: Converter, node: TypeNode) -> T.Type:
    return T.IntrinsicType(node.name or node.text)


# Literal types, not type literals: "a", 1, true, null, 10n
def convert_literal(converter: Converter, node: TypeNode) -> T.Type:
    if node.bigint:
        digits = str(node.value).strip()
        negative = digits.startswith("-")
        return T.LiteralType(T.BigIntLiteral(digits.lstrip("-").rstrip("n"), negative))
    return T.LiteralType(node.value)


# { readonly [K in Keys]?: Template }
def convert_mapped(converter: Converter, node: TypeNode) -> T.Type:
    if not node.type_parameters:
        raise ConversionError.symbol_unresolved("mapped type parameter", node.text)
    (parameter,) = convert_type_parameters(converter, node.type_parameters[:1])
    return T.MappedType(
        T.OptionalModifier(node.readonly_modifier),
        parameter,
        T.OptionalModifier(node.optional_modifier),
        converter.convert_type(node.element),
    )


# [name?: T]
def convert_named_tuple_member(converter: Converter, node: TypeNode) -> T.Type:
    return T.TupleMemberType(node.name, node.optional, converter.convert_type(node.element))


# [T?]
def convert_optional(converter: Converter, node: TypeNode) -> T.Type:
    return T.OptionalType(converter.convert_type(node.element))


# keyof T, readonly T[], unique symbol
def convert_operator(converter: Converter, node: TypeNode) -> T.Type:
    return T.TypeOperatorType(converter.convert_type(node.element), node.operator)


# ((number)) collapses to number
def convert_parenthesized(converter: Converter, node: TypeNode) -> T.Type:
    return converter.convert_type(node.element)


# asserts x is T
def convert_predicate(converter: Converter, node: TypeNode) -> T.Type:
    target = converter.convert_type(node.element) if node.element is not None else None
    return T.PredicateType(node.name, node.asserts, target)


# typeof Foo.bar
def convert_query(converter: Converter, node: TypeNode) -> T.Type:
    symbol = converter.get_symbol_at_location(node)
    if symbol is None:
        raise ConversionError.symbol_unresolved("query type", node.text)
    return T.QueryType(T.ReferenceType(symbol.name, [], symbol, True, converter.project))


# Array<Foo>
def convert_reference(converter: Converter, node: TypeNode) -> T.Type:
    symbol = converter.get_symbol_at_location(node)
    if symbol is None:
        raise ConversionError.symbol_unresolved("reference type", node.text)
    arguments = [converter.convert_type(arg) for arg in node.type_arguments]
    return T.ReferenceType(symbol.name, arguments, symbol, False, converter.project)


def convert_this(converter: Converter, node: TypeNode) -> T.Type:
    return T.IntrinsicType("this")


def convert_tuple(converter: Converter, node: TypeNode) -> T.Type:
    return T.TupleType([converter.convert_type(t) for t in node.types])


# { a: string; (): string; new (): Foo }
def convert_type_literal(converter: Converter, node: TypeNode) -> T.Type:
    properties = [
        T.PropertyType(
            member.name,
            member.has_modifier("readonly"),
            member.question_token,
            converter.convert_type(member.type_node or converter.model.get_type_at_location(member)),
        )
        for member in node.members
        if member.kind == DeclarationKind.PROPERTY_SIGNATURE
    ]
    signatures = [
        T.SignatureType(
            convert_type_parameters(converter, member.type_parameters),
            convert_parameters(converter, member.parameters),
            converter.convert_type(member.type_node),
        )
        for member in node.members
        if member.kind == DeclarationKind.CALL_SIGNATURE
    ]
    construct_signatures = [
        T.ConstructorType(
            convert_type_parameters(converter, member.type_parameters),
            convert_parameters(converter, member.parameters),
            converter.convert_type(member.type_node),
        )
        for member in node.members
        if member.kind == DeclarationKind.CONSTRUCT_SIGNATURE
    ]

    if not properties:
        if len(signatures) == 1 and not construct_signatures:
            return signatures[0]
        if not signatures and len(construct_signatures) == 1:
            return construct_signatures[0]
    return T.ObjectType(properties, signatures, construct_signatures)


def convert_union(converter: Converter, node: TypeNode) -> T.Type:
    return T.UnionType([converter.convert_type(t) for t in node.types])


TYPE_NODE_CONVERTERS = (
    TypeNodeConverter((TypeNodeKind.ARRAY,), convert_array),
    TypeNodeConverter((TypeNodeKind.CONDITIONAL,), convert_conditional),
    TypeNodeConverter((TypeNodeKind.CONSTRUCTOR,), convert_constructor),
    TypeNodeConverter(
        (TypeNodeKind.EXPRESSION_WITH_TYPE_ARGUMENTS,), convert_expression_with_type_arguments
    ),
    TypeNodeConverter((TypeNodeKind.FUNCTION,), convert_function),
    TypeNodeConverter((TypeNodeKind.INDEXED_ACCESS,), convert_indexed_access),
    TypeNodeConverter((TypeNodeKind.INFER,), convert_infer),
    TypeNodeConverter((TypeNodeKind.INTERSECTION,), convert_intersection),
    TypeNodeConverter((TypeNodeKind.KEYWORD,), convert_keyword),
    TypeNodeConverter((TypeNodeKind.LITERAL,), convert_literal),
    TypeNodeConverter((TypeNodeKind.MAPPED,), convert_mapped),
    TypeNodeConverter((TypeNodeKind.NAMED_TUPLE_MEMBER,), convert_named_tuple_member),
    TypeNodeConverter((TypeNodeKind.OPTIONAL,), convert_optional),
    TypeNodeConverter((TypeNodeKind.TYPE_OPERATOR,), convert_operator),
    TypeNodeConverter((TypeNodeKind.PARENTHESIZED,), convert_parenthesized),
    TypeNodeConverter((TypeNodeKind.PREDICATE,), convert_predicate),
    TypeNodeConverter((TypeNodeKind.QUERY,), convert_query),
    TypeNodeConverter((TypeNodeKind.REFERENCE,), convert_reference),
    TypeNodeConverter((TypeNodeKind.THIS,), convert_this),
    TypeNodeConverter((TypeNodeKind.TUPLE,), convert_tuple),
    TypeNodeConverter((TypeNodeKind.TYPE_LITERAL,), convert_type_literal),
    TypeNodeConverter((TypeNodeKind.UNION,), convert_union),
)


def add_type_node_converters(converter: Converter) -> None:
    for type_node_converter in TYPE_NODE_CONVERTERS:
        converter.add_type_node_converter(type_node_converter)
