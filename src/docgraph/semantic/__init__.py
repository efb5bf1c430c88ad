"""Semantic program model: the query contract and an in-memory implementation."""

from docgraph.semantic.memory import InMemorySemanticModel, load_program
from docgraph.semantic.model import (
    SIGNATURE_DECLARATION_KINDS,
    Declaration,
    DeclarationKind,
    HeritageClause,
    ResolvedType,
    SemanticModel,
    Signature,
    Symbol,
    SymbolFlags,
    TypeFlags,
    TypeNode,
    TypeNodeKind,
)

__all__ = [
    "SIGNATURE_DECLARATION_KINDS",
    "Declaration",
    "DeclarationKind",
    "HeritageClause",
    "InMemorySemanticModel",
    "ResolvedType",
    "SemanticModel",
    "Signature",
    "Symbol",
    "SymbolFlags",
    "TypeFlags",
    "TypeNode",
    "TypeNodeKind",
    "load_program",
]
