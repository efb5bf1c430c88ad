"""Converters for checker-resolved types.

Used when no type node exists, e.g. for an inferred return type. These
mostly mirror the type node converters. Converters are tried in ``order``
(then registration) sequence and the first whose ``supports`` accepts the
type wins. The object converter runs last: almost every type is an object.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from docgraph.converter.registry import ResolvedTypeConverter
from docgraph.converter.utils import convert_resolved_type_parameters, convert_symbol_parameters
from docgraph.core.errors import ConversionError
from docgraph.models import types as T
from docgraph.semantic.model import DeclarationKind, SymbolFlags, TypeFlags

if TYPE_CHECKING:
    from docgraph.converter.converter import Converter
    from docgraph.semantic.model import ResolvedType, Signature

_INTRINSIC_NAMES = (
    (TypeFlags.ANY, "any"),
    (TypeFlags.UNKNOWN, "unknown"),
    (TypeFlags.STRING, "string"),
    (TypeFlags.NUMBER, "number"),
    (TypeFlags.BOOLEAN, "boolean"),
    (TypeFlags.BIGINT, "bigint"),
    (TypeFlags.VOID, "void"),
    (TypeFlags.UNDEFINED, "undefined"),
    (TypeFlags.NULL, "null"),
    (TypeFlags.NEVER, "never"),
    (TypeFlags.ES_SYMBOL, "symbol"),
)
_INTRINSIC_FLAGS = TypeFlags.NONE
for _flag, _ in _INTRINSIC_NAMES:
    _INTRINSIC_FLAGS |= _flag

# Declarations whose symbol names a documented type.
_NAMED_TYPE_DECLARATIONS = frozenset(
    {DeclarationKind.CLASS, DeclarationKind.INTERFACE, DeclarationKind.ENUM}
)


def _convert_intrinsic(converter: Converter, type: ResolvedType) -> T.Type:
    for flag, name in _INTRINSIC_NAMES:
        if type.has_flag(flag):
            return T.IntrinsicType(name)
    return T.UnknownType(converter.model.type_to_string(type))


def _convert_array(converter: Converter, type: ResolvedType) -> T.Type:
    return T.ArrayType(converter.convert_type(type.element_type))


def _convert_conditional(converter: Converter, type: ResolvedType) -> T.Type:
    return T.ConditionalType(
        converter.convert_type(type.check_type),
        converter.convert_type(type.extends_type),
        converter.convert_type(type.true_type),
        converter.convert_type(type.false_type),
    )


def _convert_literal(converter: Converter, type: ResolvedType) -> T.Type:
    if type.has_flag(TypeFlags.BIGINT_LITERAL):
        digits = str(type.value).lstrip("-").rstrip("n")
        negative = type.negative or str(type.value).startswith("-")
        return T.LiteralType(T.BigIntLiteral(digits, negative))
    return T.LiteralType(type.value)


def _convert_tuple(converter: Converter, type: ResolvedType) -> T.Type:
    return T.TupleType([converter.convert_type(t) for t in type.types])


def _convert_type_parameter(converter: Converter, type: ResolvedType) -> T.Type:
    return convert_resolved_type_parameters(converter, [type])[0]


def _convert_union_or_intersection(converter: Converter, type: ResolvedType) -> T.Type:
    types = [converter.convert_type(t) for t in type.types]
    return T.UnionType(types) if type.has_flag(TypeFlags.UNION) else T.IntersectionType(types)


def convert_alias_reference(converter: Converter, type: ResolvedType) -> T.Type:
    """Reference to the type alias ``type`` was written through."""
    alias = type.alias_symbol
    if alias is None:
        raise ConversionError.symbol_unresolved("alias reference", converter.model.type_to_string(type))
    return T.ReferenceType(
        alias.name,
        [converter.convert_type(arg) for arg in type.alias_type_arguments],
        alias,
        False,
        converter.project,
    )


def _names_documented_type(type: ResolvedType) -> bool:
    symbol = type.symbol
    return (
        type.has_flag(TypeFlags.OBJECT)
        and symbol is not None
        and any(d.kind in _NAMED_TYPE_DECLARATIONS for d in symbol.declarations)
    )


def convert_symbol_reference(converter: Converter, type: ResolvedType) -> T.Type:
    """Reference to the class, interface or enum that declares ``type``."""
    symbol = type.symbol
    if symbol is None:
        raise ConversionError.symbol_unresolved("symbol reference", converter.model.type_to_string(type))
    return T.ReferenceType(symbol.name, [], symbol, False, converter.project)


def _signature_parts(
    converter: Converter, signature: Signature
) -> tuple[list[T.TypeParameterType], list[T.SignatureParameterType], T.Type]:
    return (
        convert_resolved_type_parameters(converter, signature.type_parameters),
        convert_symbol_parameters(converter, signature.parameters),
        converter.convert_type(signature.return_type),
    )


def _convert_object(converter: Converter, type: ResolvedType) -> T.Type:
    model = converter.model
    properties = []
    for symbol in type.properties:
        declaration = symbol.value_declaration
        properties.append(
            T.PropertyType(
                symbol.name,
                bool(declaration and declaration.has_modifier("readonly")),
                bool(symbol.flags & SymbolFlags.OPTIONAL),
                converter.convert_type(model.get_type_of_symbol(symbol)),
            )
        )
    signatures = [T.SignatureType(*_signature_parts(converter, s)) for s in type.call_signatures]
    construct_signatures = [
        T.ConstructorType(*_signature_parts(converter, s)) for s in type.construct_signatures
    ]
    return T.ObjectType(properties, signatures, construct_signatures)


TYPE_CONVERTERS = (
    ResolvedTypeConverter("array", lambda t: t.is_array and t.element_type is not None, _convert_array),
    ResolvedTypeConverter("conditional", lambda t: t.has_flag(TypeFlags.CONDITIONAL), _convert_conditional),
    ResolvedTypeConverter("literal", lambda t: t.has_flag(TypeFlags.LITERAL), _convert_literal),
    ResolvedTypeConverter("intrinsic", lambda t: t.has_flag(_INTRINSIC_FLAGS), _convert_intrinsic),
    ResolvedTypeConverter("tuple", lambda t: t.is_tuple, _convert_tuple),
    ResolvedTypeConverter(
        "type_parameter", lambda t: t.has_flag(TypeFlags.TYPE_PARAMETER), _convert_type_parameter
    ),
    ResolvedTypeConverter(
        "union_or_intersection",
        lambda t: t.has_flag(TypeFlags.UNION | TypeFlags.INTERSECTION),
        _convert_union_or_intersection,
    ),
    # After array.
    ResolvedTypeConverter(
        "alias_reference", lambda t: t.alias_symbol is not None, convert_alias_reference, order=50
    ),
    ResolvedTypeConverter(
        "symbol_reference", _names_documented_type, convert_symbol_reference, order=60
    ),
    # Must run last or object-like types never reach their own converter.
    ResolvedTypeConverter("object", lambda t: t.has_flag(TypeFlags.OBJECT), _convert_object, order=100),
)


def add_type_converters(converter: Converter) -> None:
    for type_converter in TYPE_CONVERTERS:
        converter.add_type_converter(type_converter)
