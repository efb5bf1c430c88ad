"""Signature reflections built from signature-bearing declarations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docgraph.converter.comments import get_comment_for_nodes
from docgraph.converter.utils import convert_resolved_type_parameters, convert_type_parameters
from docgraph.core.errors import ConversionError
from docgraph.models.reflections import ParameterReflection, SignatureReflection
from docgraph.semantic.model import DeclarationKind

if TYPE_CHECKING:
    from docgraph.converter.context import Context
    from docgraph.semantic.model import Declaration


async def convert_signature_declaration(
    context: Context, name: str, declaration: Declaration
) -> SignatureReflection:
    """Convert one declaration into a SignatureReflection with its parameters.

    Raises:
        ConversionError: If the semantic model has no signature for the
            declaration, or a parameter has no parameter declaration.
    """
    converter = context.converter
    model = context.model

    signature = model.get_signature_from_declaration(declaration)
    if signature is None:
        raise ConversionError.signature_unresolved(name)

    signature_id = context.next_id()
    return_type = converter.convert_type(declaration.type_node or signature.return_type)

    parameters = []
    for param in signature.parameters:
        param_declaration = param.value_declaration
        if param_declaration is None or param_declaration.kind != DeclarationKind.PARAMETER:
            raise ConversionError.parameter_undeclared(name, param.name)

        param_type = converter.convert_type(
            param_declaration.type_node or model.get_type_of_symbol(param)
        )
        parameter = ParameterReflection(
            context.next_id(),
            param.name,
            param_type,
            default_value=param_declaration.initializer,
            is_optional=param_declaration.question_token or param_declaration.initializer is not None,
            is_rest=param_declaration.dot_dot_dot_token,
        )
        parameter.comment = get_comment_for_nodes([param_declaration])
        parameters.append(parameter)

    if declaration.type_parameters:
        type_parameters = convert_type_parameters(converter, declaration.type_parameters)
    else:
        type_parameters = convert_resolved_type_parameters(converter, signature.type_parameters)

    reflection = SignatureReflection(signature_id, name, return_type, parameters, type_parameters)
    # Signatures bypass convert_symbol, so they attach their own comment.
    reflection.comment = get_comment_for_nodes([declaration])
    return reflection
