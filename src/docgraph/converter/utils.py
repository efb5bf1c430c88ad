"""Helpers shared by the node and type converters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docgraph.models.flags import ReflectionFlag, ReflectionFlags
from docgraph.models.reflections import Visibility
from docgraph.models.types import SignatureParameterType, TypeParameterType

if TYPE_CHECKING:
    from docgraph.converter.converter import Converter
    from docgraph.semantic.model import Declaration, ResolvedType, Symbol


def convert_type_parameters(
    converter: Converter, declarations: list[Declaration]
) -> list[TypeParameterType]:
    """Type parameters as written: ``<T extends C = D>``."""
    return [
        TypeParameterType(
            declaration.name,
            converter.convert_type(declaration.constraint) if declaration.constraint else None,
            converter.convert_type(declaration.default) if declaration.default else None,
        )
        for declaration in declarations
    ]


def convert_resolved_type_parameters(
    converter: Converter, types: list[ResolvedType]
) -> list[TypeParameterType]:
    return [
        TypeParameterType(
            type.name,
            converter.convert_type(type.constraint) if type.constraint else None,
            converter.convert_type(type.default) if type.default else None,
        )
        for type in types
    ]


def convert_parameters(
    converter: Converter, declarations: list[Declaration]
) -> list[SignatureParameterType]:
    """Parameters of a function type as written."""
    parameters = []
    for index, declaration in enumerate(declarations):
        type = converter.convert_type(
            declaration.type_node or converter.model.get_type_at_location(declaration)
        )
        parameters.append(
            SignatureParameterType(
                declaration.name or f"param{index}",
                declaration.question_token,
                declaration.dot_dot_dot_token,
                type,
            )
        )
    return parameters


def convert_symbol_parameters(
    converter: Converter, symbols: list[Symbol]
) -> list[SignatureParameterType]:
    """Parameters of a checked signature."""
    parameters = []
    for symbol in symbols:
        declaration = symbol.value_declaration
        parameters.append(
            SignatureParameterType(
                symbol.name,
                bool(declaration and declaration.question_token),
                bool(declaration and declaration.dot_dot_dot_token),
                converter.convert_type(converter.model.get_type_of_symbol(symbol)),
            )
        )
    return parameters


def get_visibility(declaration: Declaration) -> Visibility:
    if declaration.has_modifier("private"):
        return Visibility.PRIVATE
    if declaration.has_modifier("protected"):
        return Visibility.PROTECTED
    return Visibility.PUBLIC


def apply_modifier_flags(flags: ReflectionFlags, declaration: Declaration) -> None:
    """Copy declaration modifiers that map onto reflection flags."""
    flags.set_flag(ReflectionFlag.STATIC, declaration.has_modifier("static"))
    flags.set_flag(ReflectionFlag.ABSTRACT, declaration.has_modifier("abstract"))
    flags.set_flag(ReflectionFlag.READONLY, declaration.has_modifier("readonly"))
    if declaration.question_token:
        flags.set_flag(ReflectionFlag.OPTIONAL, True)
