"""Reflection converters, one per declaration kind.

Each converter's ``convert`` creates the reflection. Containers that need
their members converted do so in ``convert_children``, which the engine calls
after the reflection has been registered, added to its parent and announced
through ``reflection_created``.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from docgraph.converter.registry import ReflectionConverter
from docgraph.converter.signature import convert_signature_declaration
from docgraph.converter.utils import apply_modifier_flags, convert_type_parameters, get_visibility
from docgraph.core.errors import ConversionError
from docgraph.models.flags import ReflectionFlag
from docgraph.models.reflections import (
    AccessorReflection,
    ClassReflection,
    EnumMemberReflection,
    EnumReflection,
    FunctionReflection,
    InterfaceReflection,
    MethodReflection,
    NamespaceReflection,
    PropertyReflection,
    Reflection,
    SignatureReflection,
    TypeAliasReflection,
    VariableReflection,
)
from docgraph.models.types import ReferenceType
from docgraph.semantic.model import DeclarationKind, SymbolFlags

if TYPE_CHECKING:
    from docgraph.converter.context import Context
    from docgraph.converter.converter import Converter
    from docgraph.models.reflections import ContainerReflection
    from docgraph.semantic.model import Declaration, Symbol

# Member names that hold signatures rather than documented members.
CALL_MEMBER = "__call"
NEW_MEMBER = "__new"
CONSTRUCTOR_MEMBER = "constructor"
_SIGNATURE_MEMBERS = frozenset({CALL_MEMBER, NEW_MEMBER, CONSTRUCTOR_MEMBER})


def real_overloads(nodes: list[Declaration]) -> list[Declaration]:
    """Declarations that document a signature.

    With overloads only the declarations without a body are real; a lone
    declaration is real whether or not it has one.
    """
    if len(nodes) == 1:
        return list(nodes)
    return [node for node in nodes if not node.has_body]


async def _convert_signatures(
    context: Context, name: str, nodes: list[Declaration]
) -> list[SignatureReflection]:
    return list(
        await asyncio.gather(*(convert_signature_declaration(context, name, node) for node in nodes))
    )


def _member_declarations(context: Context, symbol: Symbol, name: str, kind: DeclarationKind) -> list[Declaration]:
    member = symbol.members.get(name)
    if member is None:
        return []
    return [d for d in context.model.get_declarations(member) if d.kind == kind]


def _documented_members(symbol: Symbol) -> list[Symbol]:
    return [
        member
        for name, member in symbol.members.items()
        if name not in _SIGNATURE_MEMBERS and not member.flags & SymbolFlags.TYPE_PARAMETER
    ]


async def _convert_members(
    context: Context, reflection: Reflection, symbol: Symbol, nodes: list[Declaration]
) -> None:
    container: ContainerReflection = reflection  # type: ignore[assignment]
    await context.converter.convert_children(context, container, _documented_members(symbol))


# =============================================================================
# Classes and interfaces
# =============================================================================


async def convert_class(context: Context, symbol: Symbol, nodes: list[Declaration]) -> ClassReflection:
    # nodes[0] is the class declaration; merged interface declarations follow it.
    node = nodes[0]
    converter = context.converter
    reflection_id = context.next_id()

    signatures = await _convert_signatures(
        context, CALL_MEMBER, _member_declarations(context, symbol, CALL_MEMBER, DeclarationKind.CALL_SIGNATURE)
    )
    constructors = _member_declarations(
        context, symbol, CONSTRUCTOR_MEMBER, DeclarationKind.CONSTRUCTOR
    )
    construct_signatures = await _convert_signatures(
        context, f"new {symbol.name}", real_overloads(constructors) if constructors else []
    )

    implemented_types = []
    for type_node in node.heritage_types("implements"):
        implemented = converter.convert_type(type_node)
        if not isinstance(implemented, ReferenceType):
            raise ConversionError.symbol_unresolved("implemented type", type_node.text)
        implemented_types.append(implemented)

    extends = node.heritage_types("extends")
    extended_type = converter.convert_type(extends[0]) if extends else None

    reflection = ClassReflection(
        reflection_id,
        symbol.name,
        signatures=signatures,
        construct_signatures=construct_signatures,
        type_parameters=convert_type_parameters(converter, node.type_parameters),
        implemented_types=implemented_types,
        extended_type=extended_type,
    )
    reflection.flags.set_flag(ReflectionFlag.ABSTRACT, node.has_modifier("abstract"))
    return reflection


async def convert_interface(
    context: Context, symbol: Symbol, nodes: list[Declaration]
) -> InterfaceReflection:
    converter = context.converter
    reflection_id = context.next_id()

    signatures = await _convert_signatures(
        context, CALL_MEMBER, _member_declarations(context, symbol, CALL_MEMBER, DeclarationKind.CALL_SIGNATURE)
    )
    construct_signatures = await _convert_signatures(
        context,
        NEW_MEMBER,
        _member_declarations(context, symbol, NEW_MEMBER, DeclarationKind.CONSTRUCT_SIGNATURE),
    )

    # Interfaces may be declared several times; gather every heritage clause.
    extended_types = [
        converter.convert_type(type_node)
        for node in nodes
        for type_node in node.heritage_types("extends")
    ]
    type_parameters = next((node.type_parameters for node in nodes if node.type_parameters), [])

    return InterfaceReflection(
        reflection_id,
        symbol.name,
        signatures=signatures,
        construct_signatures=construct_signatures,
        type_parameters=convert_type_parameters(converter, type_parameters),
        extended_types=extended_types,
    )


# =============================================================================
# Functions and members
# =============================================================================


async def convert_function(
    context: Context, symbol: Symbol, nodes: list[Declaration]
) -> FunctionReflection:
    container = FunctionReflection(context.next_id(), symbol.name)
    for signature in await _convert_signatures(context, symbol.name, real_overloads(nodes)):
        container.add_signature(signature)
    return container


async def convert_method(context: Context, symbol: Symbol, nodes: list[Declaration]) -> MethodReflection:
    # All overloads share the visibility of the first.
    container = MethodReflection(context.next_id(), symbol.name, get_visibility(nodes[0]))
    apply_modifier_flags(container.flags, nodes[0])
    for signature in await _convert_signatures(context, symbol.name, real_overloads(nodes)):
        container.add_signature(signature)
    return container


async def convert_property(
    context: Context, symbol: Symbol, nodes: list[Declaration]
) -> PropertyReflection | MethodReflection:
    node = nodes[0]

    # class Foo { bar = () => this.baz } documents bar as a method.
    if node.arrow_function is not None:
        container = MethodReflection(context.next_id(), symbol.name, get_visibility(node))
        apply_modifier_flags(container.flags, node)
        container.add_signature(
            await convert_signature_declaration(context, symbol.name, node.arrow_function)
        )
        return container

    reflection_id = context.next_id()
    type = context.converter.convert_type(
        node.type_node or context.model.get_type_of_symbol(symbol)
    )
    reflection = PropertyReflection(
        reflection_id, symbol.name, type, get_visibility(node), default_value=node.initializer
    )
    apply_modifier_flags(reflection.flags, node)
    return reflection


async def convert_accessor(
    context: Context, symbol: Symbol, nodes: list[Declaration]
) -> AccessorReflection:
    getter = next((n for n in nodes if n.kind == DeclarationKind.GET_ACCESSOR), None)
    setter = next((n for n in nodes if n.kind == DeclarationKind.SET_ACCESSOR), None)
    reflection_id = context.next_id()

    if getter is not None and getter.type_node is not None:
        type_source = getter.type_node
    elif setter is not None and setter.parameters and setter.parameters[0].type_node is not None:
        type_source = setter.parameters[0].type_node
    else:
        type_source = context.model.get_type_of_symbol(symbol)

    first = getter or setter or nodes[0]
    reflection = AccessorReflection(
        reflection_id,
        symbol.name,
        context.converter.convert_type(type_source),
        get_visibility(first),
        has_getter=getter is not None,
        has_setter=setter is not None,
    )
    apply_modifier_flags(reflection.flags, first)
    return reflection


async def convert_parameter_property(
    context: Context, symbol: Symbol, nodes: list[Declaration]
) -> PropertyReflection:
    """class Foo { constructor(public bar: string) {} }"""
    node = nodes[0]
    reflection_id = context.next_id()
    type = context.converter.convert_type(
        node.type_node or context.model.get_type_of_symbol(symbol)
    )
    reflection = PropertyReflection(reflection_id, symbol.name, type, get_visibility(node))
    apply_modifier_flags(reflection.flags, node)
    reflection.flags.set_flag(ReflectionFlag.CONSTRUCTOR_PROPERTY, True)
    return reflection


# =============================================================================
# Enums, namespaces, aliases and variables
# =============================================================================


async def convert_enum(context: Context, symbol: Symbol, nodes: list[Declaration]) -> EnumReflection:
    is_const = bool(symbol.flags & SymbolFlags.CONST_ENUM) or any(
        node.has_modifier("const") for node in nodes
    )
    return EnumReflection(context.next_id(), symbol.name, is_const)


async def _convert_enum_members(
    context: Context, reflection: Reflection, symbol: Symbol, nodes: list[Declaration]
) -> None:
    members = context.get_exports_of_kind(symbol, DeclarationKind.ENUM_MEMBER)
    await context.converter.convert_children(context, reflection, members)  # type: ignore[arg-type]


async def convert_enum_member(
    context: Context, symbol: Symbol, nodes: list[Declaration]
) -> EnumMemberReflection:
    value = context.model.get_constant_value(nodes[0])
    if value is None:
        raise ConversionError.enum_value_missing(symbol.name)
    return EnumMemberReflection(context.next_id(), symbol.name, value)


async def convert_namespace(
    context: Context, symbol: Symbol, nodes: list[Declaration]
) -> NamespaceReflection:
    return NamespaceReflection(context.next_id(), symbol.name)


async def _convert_namespace_exports(
    context: Context, reflection: Reflection, symbol: Symbol, nodes: list[Declaration]
) -> None:
    await context.converter.convert_children(context, reflection, context.get_exports(symbol))  # type: ignore[arg-type]


async def convert_alias(context: Context, symbol: Symbol, nodes: list[Declaration]) -> TypeAliasReflection:
    node = nodes[0]
    converter = context.converter
    reflection_id = context.next_id()
    return TypeAliasReflection(
        reflection_id,
        symbol.name,
        converter.convert_type(node.type_node),
        convert_type_parameters(converter, node.type_parameters),
    )


async def convert_variable(
    context: Context, symbol: Symbol, nodes: list[Declaration]
) -> VariableReflection:
    node = nodes[0]
    reflection_id = context.next_id()
    reflection = VariableReflection(
        reflection_id,
        symbol.name,
        context.converter.convert_type(node.type_node or context.model.get_type_of_symbol(symbol)),
        default_value=node.initializer,
    )
    if node.has_modifier("const"):
        reflection.flags.set_flag(ReflectionFlag.CONST, True)
    elif node.has_modifier("let"):
        reflection.flags.set_flag(ReflectionFlag.LET, True)
    return reflection


NODE_CONVERTERS = (
    ReflectionConverter((DeclarationKind.CLASS,), convert_class, _convert_members),
    ReflectionConverter((DeclarationKind.INTERFACE,), convert_interface, _convert_members),
    ReflectionConverter((DeclarationKind.FUNCTION,), convert_function),
    ReflectionConverter(
        (DeclarationKind.METHOD, DeclarationKind.METHOD_SIGNATURE), convert_method
    ),
    ReflectionConverter(
        (DeclarationKind.PROPERTY, DeclarationKind.PROPERTY_SIGNATURE), convert_property
    ),
    ReflectionConverter(
        (DeclarationKind.GET_ACCESSOR, DeclarationKind.SET_ACCESSOR), convert_accessor
    ),
    ReflectionConverter((DeclarationKind.PARAMETER,), convert_parameter_property),
    ReflectionConverter((DeclarationKind.ENUM,), convert_enum, _convert_enum_members),
    ReflectionConverter((DeclarationKind.ENUM_MEMBER,), convert_enum_member),
    ReflectionConverter((DeclarationKind.NAMESPACE,), convert_namespace, _convert_namespace_exports),
    ReflectionConverter((DeclarationKind.TYPE_ALIAS,), convert_alias),
    ReflectionConverter((DeclarationKind.VARIABLE,), convert_variable),
)


def add_node_converters(converter: Converter) -> None:
    for node_converter in NODE_CONVERTERS:
        converter.add_reflection_converter(node_converter)
