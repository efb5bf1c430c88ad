"""In-memory semantic model built from a program description.

Symbols are addressed by id when one type refers to another. A symbol's id is,
in lookup order: its explicit ``id``, its qualified path (``file:Outer.Inner``),
or its bare name when that name is unique across the program.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from docgraph.core.errors import SemanticModelError
from docgraph.core.logging import get_logger
from docgraph.semantic.description import (
    DeclarationDescription,
    FileDescription,
    ProgramDescription,
    ResolvedTypeDescription,
    SignatureDescription,
    SymbolDescription,
    TypeNodeDescription,
)
from docgraph.semantic.model import (
    SIGNATURE_DECLARATION_KINDS,
    ConstantValue,
    Declaration,
    DeclarationKind,
    HeritageClause,
    ResolvedType,
    Signature,
    Symbol,
    SymbolFlags,
    TypeFlags,
    TypeNode,
)

log = get_logger("semantic.memory")

_SYMBOL_FLAGS = {
    "alias": SymbolFlags.ALIAS,
    "optional": SymbolFlags.OPTIONAL,
    "const_enum": SymbolFlags.CONST_ENUM,
    "type_parameter": SymbolFlags.TYPE_PARAMETER,
}

_TYPE_FLAG_NAMES = {
    "any": TypeFlags.ANY,
    "unknown": TypeFlags.UNKNOWN,
    "string": TypeFlags.STRING,
    "number": TypeFlags.NUMBER,
    "boolean": TypeFlags.BOOLEAN,
    "bigint": TypeFlags.BIGINT,
    "void": TypeFlags.VOID,
    "undefined": TypeFlags.UNDEFINED,
    "null": TypeFlags.NULL,
    "never": TypeFlags.NEVER,
    "symbol": TypeFlags.ES_SYMBOL,
    "object": TypeFlags.OBJECT,
    "this": TypeFlags.OBJECT,
    "string_literal": TypeFlags.STRING_LITERAL,
    "number_literal": TypeFlags.NUMBER_LITERAL,
    "boolean_literal": TypeFlags.BOOLEAN_LITERAL,
    "bigint_literal": TypeFlags.BIGINT_LITERAL,
    "union": TypeFlags.UNION,
    "intersection": TypeFlags.INTERSECTION,
    "conditional": TypeFlags.CONDITIONAL,
    "type_parameter": TypeFlags.TYPE_PARAMETER,
}


class InMemorySemanticModel:
    """A complete, read-only program held in memory."""

    def __init__(self, name: str, root_dir: str, files: list[Declaration], entries: list[str]) -> None:
        self._name = name
        self._root_dir = root_dir
        self._files = {f.source_file: f for f in files}
        self._entries = entries

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str = "<memory>") -> InMemorySemanticModel:
        try:
            description = ProgramDescription.model_validate(data)
        except ValidationError as e:
            err = e.errors()[0]
            where = ".".join(str(loc) for loc in err["loc"])
            raise SemanticModelError.parse_error(source, f"{where}: {err['msg']}") from e
        return _Builder(description).build()

    @classmethod
    def from_path(cls, path: Path) -> InMemorySemanticModel:
        """Load a program description from a .yaml, .yml or .json file."""
        try:
            text = path.read_text()
        except OSError as e:
            raise SemanticModelError.parse_error(str(path), str(e)) from e
        try:
            if path.suffix == ".json":
                data = json.loads(text)
            else:
                data = yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SemanticModelError.parse_error(str(path), str(e)) from e
        if not isinstance(data, dict):
            raise SemanticModelError.parse_error(str(path), "top level must be a mapping")
        return cls.from_dict(data, source=str(path))

    # -------------------------------------------------------------------------
    # SemanticModel protocol
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def root_dir(self) -> str:
        return self._root_dir

    def entry_files(self) -> list[Declaration]:
        return [self._files[path] for path in self._entries]

    def get_source_file(self, path: str) -> Declaration | None:
        return self._files.get(path)

    def get_source_file_symbol(self, source_file: Declaration) -> Symbol | None:
        return source_file.symbol

    def get_exports_of_module(self, module_symbol: Symbol) -> list[Symbol]:
        return list(module_symbol.exports.values())

    def get_declarations(self, symbol: Symbol) -> list[Declaration]:
        return list(symbol.declarations)

    def get_aliased_symbol(self, symbol: Symbol) -> Symbol:
        seen: set[int] = set()
        while symbol.is_alias and symbol.aliased is not None and id(symbol) not in seen:
            seen.add(id(symbol))
            symbol = symbol.aliased
        return symbol

    def get_symbol_at_location(self, node: TypeNode) -> Symbol | None:
        return node.symbol

    def get_type_at_location(self, node: Declaration | TypeNode) -> ResolvedType | None:
        return node.resolved_type

    def get_type_of_symbol(self, symbol: Symbol) -> ResolvedType | None:
        declaration = symbol.value_declaration
        if declaration is not None and declaration.resolved_type is not None:
            return declaration.resolved_type
        for declaration in symbol.declarations:
            if declaration.resolved_type is not None:
                return declaration.resolved_type
        return None

    def get_signature_from_declaration(self, declaration: Declaration) -> Signature | None:
        return declaration.signature

    def get_constant_value(self, declaration: Declaration) -> ConstantValue | None:
        return declaration.constant_value

    def type_to_string(self, type: ResolvedType) -> str:
        if type.display:
            return type.display
        if type.name:
            return type.name
        if type.has_flag(TypeFlags.LITERAL):
            return json.dumps(type.value) if isinstance(type.value, str) else str(type.value)
        for name, flag in _TYPE_FLAG_NAMES.items():
            if type.flags == flag:
                return name
        return "unknown"


class _Builder:
    """Two passes: build every symbol, then resolve symbol ids."""

    def __init__(self, description: ProgramDescription) -> None:
        self._description = description
        self._by_id: dict[str, Symbol] = {}
        self._by_name: dict[str, list[Symbol]] = {}
        self._fixups: list[tuple[str, Callable[[Symbol], None]]] = []

    def build(self) -> InMemorySemanticModel:
        files = [self._build_file(f) for f in self._description.files]
        for ref, apply in self._fixups:
            apply(self._resolve(ref))
        entries = [f.path for f in self._description.files if f.entry]
        log.debug("semantic.program_loaded", files=len(files), symbols=len(self._by_id))
        return InMemorySemanticModel(
            name=self._description.name,
            root_dir=self._description.root_dir,
            files=files,
            entries=entries,
        )

    def _resolve(self, ref: str) -> Symbol:
        if ref in self._by_id:
            return self._by_id[ref]
        candidates = self._by_name.get(ref, [])
        if len(candidates) == 1:
            return candidates[0]
        raise SemanticModelError.unknown_symbol(ref)

    def _defer(self, ref: str | None, apply: Callable[[Symbol], None]) -> None:
        if ref is not None:
            self._fixups.append((ref, apply))

    # -------------------------------------------------------------------------
    # Files and symbols
    # -------------------------------------------------------------------------

    def _build_file(self, description: FileDescription) -> Declaration:
        source_file = Declaration(
            kind=DeclarationKind.SOURCE_FILE,
            name=description.path,
            source_file=description.path,
            comments=list(description.comments),
        )
        symbol = Symbol(name=f'"{description.path}"', declarations=[source_file])
        source_file.symbol = symbol
        for export in description.exports:
            child = self._build_symbol(export, description.path, f"{description.path}:")
            symbol.exports[child.name] = child
        return source_file

    def _build_symbol(self, description: SymbolDescription, path: str, prefix: str) -> Symbol:
        flags = SymbolFlags.NONE
        for name in description.flags:
            flags |= _SYMBOL_FLAGS[name]
        if description.alias is not None:
            flags |= SymbolFlags.ALIAS

        symbol = Symbol(name=description.name, flags=flags)
        qualified = prefix + description.name
        self._by_id[qualified] = symbol
        if description.id is not None:
            self._by_id[description.id] = symbol
        self._by_name.setdefault(description.name, []).append(symbol)

        for decl in description.declarations:
            declaration = self._build_declaration(decl, path, symbol)
            symbol.declarations.append(declaration)
        if symbol.declarations:
            symbol.value_declaration = symbol.declarations[0]

        for member in description.members:
            child = self._build_symbol(member, path, qualified + ".")
            symbol.members[child.name] = child
        for export in description.exports:
            child = self._build_symbol(export, path, qualified + ".")
            symbol.exports[child.name] = child

        if description.alias is not None:

            def set_alias(target: Symbol, symbol: Symbol = symbol) -> None:
                symbol.aliased = target

            self._defer(description.alias, set_alias)
        return symbol

    # -------------------------------------------------------------------------
    # Declarations
    # -------------------------------------------------------------------------

    def _build_declaration(
        self, description: DeclarationDescription, path: str, symbol: Symbol | None
    ) -> Declaration:
        declaration = Declaration(
            kind=description.kind,
            name=description.name or (symbol.name if symbol else ""),
            source_file=path,
            symbol=symbol,
            has_body=description.has_body,
            type_node=self._type_node(description.type_node, path),
            resolved_type=self._resolved(description.resolved, path),
            initializer=description.initializer,
            modifiers=frozenset(description.modifiers),
            question_token=description.optional,
            dot_dot_dot_token=description.rest,
            constraint=self._type_node(description.constraint, path),
            default=self._type_node(description.default, path),
            comments=list(description.comments),
            constant_value=description.value,
        )
        declaration.parameters = [self._build_declaration(p, path, None) for p in description.parameters]
        declaration.type_parameters = [
            self._build_declaration(tp, path, None) for tp in description.type_parameters
        ]
        declaration.heritage = [
            HeritageClause(token=h.token, types=[self._type_node(t, path) for t in h.types])
            for h in description.heritage
        ]
        if description.arrow_function is not None:
            declaration.arrow_function = self._build_declaration(
                description.arrow_function, path, None
            )

        if description.kind in SIGNATURE_DECLARATION_KINDS and description.signature:
            declaration.signature = Signature(
                declaration=declaration,
                parameters=[
                    self._parameter_symbol(param, spec)
                    for param, spec in zip(declaration.parameters, description.parameters)
                ],
                type_parameters=[
                    ResolvedType(flags=TypeFlags.TYPE_PARAMETER, name=tp.name, display=tp.name)
                    for tp in declaration.type_parameters
                ],
                return_type=self._resolved(description.return_resolved, path),
            )
        return declaration

    def _parameter_symbol(self, declaration: Declaration, description: DeclarationDescription) -> Symbol:
        symbol = Symbol(name=declaration.name, declarations=[declaration])
        declaration.symbol = symbol
        if not description.undeclared:
            symbol.value_declaration = declaration
        return symbol

    # -------------------------------------------------------------------------
    # Types
    # -------------------------------------------------------------------------

    def _type_node(self, description: TypeNodeDescription | None, path: str) -> TypeNode | None:
        if description is None:
            return None

        def many(items: list[TypeNodeDescription]) -> list[TypeNode]:
            return [node for item in items if (node := self._type_node(item, path)) is not None]

        node = TypeNode(
            kind=description.kind,
            text=description.text or description.name,
            name=description.name,
            element=self._type_node(description.element, path),
            types=many(description.types),
            type_arguments=many(description.type_arguments),
            check_type=self._type_node(description.check_type, path),
            extends_type=self._type_node(description.extends_type, path),
            true_type=self._type_node(description.true_type, path),
            false_type=self._type_node(description.false_type, path),
            object_type=self._type_node(description.object_type, path),
            index_type=self._type_node(description.index_type, path),
            operator=description.operator,
            value=description.value,
            bigint=description.bigint,
            asserts=description.asserts,
            optional=description.optional,
            parameters=[self._build_declaration(p, path, None) for p in description.parameters],
            type_parameters=[
                self._build_declaration(tp, path, None) for tp in description.type_parameters
            ],
            return_type=self._type_node(description.return_type, path),
            members=[self._build_declaration(m, path, None) for m in description.members],
            readonly_modifier=description.readonly_modifier,
            optional_modifier=description.optional_modifier,
            resolved_type=self._resolved(description.resolved, path),
        )

        def set_symbol(target: Symbol, node: TypeNode = node) -> None:
            node.symbol = target

        self._defer(description.ref, set_symbol)
        return node

    def _resolved(self, description: ResolvedTypeDescription | None, path: str) -> ResolvedType | None:
        if description is None:
            return None

        flags = TypeFlags.NONE
        for name in description.flags:
            try:
                flags |= _TYPE_FLAG_NAMES[name.lower()]
            except KeyError as e:
                raise SemanticModelError.invalid_declaration(path, f"unknown type flag '{name}'") from e

        def many(items: list[ResolvedTypeDescription]) -> list[ResolvedType]:
            return [t for item in items if (t := self._resolved(item, path)) is not None]

        element = self._resolved(description.element, path)
        resolved = ResolvedType(
            flags=flags,
            display=description.display,
            name=description.name,
            value=description.value,
            negative=description.negative,
            alias_type_arguments=many(description.alias_type_arguments),
            types=many(description.types),
            element_type=element,
            is_array=element is not None,
            is_tuple=description.is_tuple,
            check_type=self._resolved(description.check_type, path),
            extends_type=self._resolved(description.extends_type, path),
            true_type=self._resolved(description.true_type, path),
            false_type=self._resolved(description.false_type, path),
            properties=[self._build_symbol(p, path, f"{path}:<type>.") for p in description.properties],
            call_signatures=[self._signature(s, path) for s in description.call_signatures],
            construct_signatures=[self._signature(s, path) for s in description.construct_signatures],
            constraint=self._resolved(description.constraint, path),
            default=self._resolved(description.default, path),
        )
        if element is not None or description.is_tuple:
            resolved.flags |= TypeFlags.OBJECT

        def set_symbol(target: Symbol, resolved: ResolvedType = resolved) -> None:
            resolved.symbol = target

        def set_alias(target: Symbol, resolved: ResolvedType = resolved) -> None:
            resolved.alias_symbol = target

        self._defer(description.ref, set_symbol)
        self._defer(description.alias, set_alias)
        return resolved

    def _signature(self, description: SignatureDescription, path: str) -> Signature:
        parameters = []
        for spec in description.parameters:
            declaration = self._build_declaration(spec, path, None)
            parameters.append(self._parameter_symbol(declaration, spec))
        return Signature(
            declaration=None,
            parameters=parameters,
            type_parameters=[
                t for spec in description.type_parameters if (t := self._resolved(spec, path)) is not None
            ],
            return_type=self._resolved(description.return_type, path),
        )


def load_program(path: Path) -> InMemorySemanticModel:
    """Load a program description file into an in-memory semantic model."""
    return InMemorySemanticModel.from_path(path)
