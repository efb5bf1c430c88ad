"""Pydantic schema of a program description file.

A program description is a YAML or JSON document listing the files, symbols,
declarations and types of a program, as a compiler front-end would report
them. ``InMemorySemanticModel`` (see memory.py) builds the semantic value
types from it.

Type positions accept a bare string as shorthand: a keyword name such as
``string`` becomes a keyword type node (or resolved type), anything else
becomes a reference to the symbol with that id.
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from docgraph.semantic.model import DeclarationKind, TypeNodeKind

KEYWORD_NAMES = frozenset(
    {
        "any",
        "unknown",
        "number",
        "bigint",
        "object",
        "boolean",
        "string",
        "symbol",
        "this",
        "void",
        "undefined",
        "null",
        "never",
    }
)

Modifier = Literal["none", "add", "remove"]
LiteralValue = Union[bool, int, float, str, None]


class _Description(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class TypeNodeDescription(_Description):
    kind: TypeNodeKind
    text: str = ""
    name: str = ""
    ref: str | None = Field(default=None, description="Symbol id this type refers to.")
    element: TypeNodeDescription | None = None
    types: list[TypeNodeDescription] = Field(default_factory=list)
    type_arguments: list[TypeNodeDescription] = Field(default_factory=list)
    check_type: TypeNodeDescription | None = Field(default=None, alias="check")
    extends_type: TypeNodeDescription | None = Field(default=None, alias="extends")
    true_type: TypeNodeDescription | None = Field(default=None, alias="then")
    false_type: TypeNodeDescription | None = Field(default=None, alias="otherwise")
    object_type: TypeNodeDescription | None = Field(default=None, alias="object")
    index_type: TypeNodeDescription | None = Field(default=None, alias="index")
    operator: str = ""
    value: LiteralValue = None
    bigint: bool = False
    asserts: bool = False
    optional: bool = False
    parameters: list[DeclarationDescription] = Field(default_factory=list)
    type_parameters: list[DeclarationDescription] = Field(default_factory=list)
    return_type: TypeNodeDescription | None = Field(default=None, alias="returns")
    members: list[DeclarationDescription] = Field(default_factory=list)
    readonly_modifier: Modifier = "none"
    optional_modifier: Modifier = "none"
    resolved: ResolvedTypeDescription | None = None

    @model_validator(mode="before")
    @classmethod
    def expand_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            if data in KEYWORD_NAMES:
                return {"kind": TypeNodeKind.KEYWORD, "name": data, "text": data}
            return {"kind": TypeNodeKind.REFERENCE, "name": data, "ref": data, "text": data}
        return data


class SignatureDescription(_Description):
    parameters: list[DeclarationDescription] = Field(default_factory=list)
    type_parameters: list[ResolvedTypeDescription] = Field(default_factory=list)
    return_type: ResolvedTypeDescription | None = Field(default=None, alias="returns")


class ResolvedTypeDescription(_Description):
    flags: list[str] = Field(default_factory=list)
    display: str = ""
    name: str = ""
    value: LiteralValue = None
    negative: bool = False
    ref: str | None = Field(default=None, description="Symbol id of the type's own symbol.")
    alias: str | None = Field(default=None, description="Symbol id of the alias naming this type.")
    alias_type_arguments: list[ResolvedTypeDescription] = Field(default_factory=list)
    types: list[ResolvedTypeDescription] = Field(default_factory=list)
    element: ResolvedTypeDescription | None = None
    is_tuple: bool = Field(default=False, alias="tuple")
    check_type: ResolvedTypeDescription | None = Field(default=None, alias="check")
    extends_type: ResolvedTypeDescription | None = Field(default=None, alias="extends")
    true_type: ResolvedTypeDescription | None = Field(default=None, alias="then")
    false_type: ResolvedTypeDescription | None = Field(default=None, alias="otherwise")
    properties: list[SymbolDescription] = Field(default_factory=list)
    call_signatures: list[SignatureDescription] = Field(default_factory=list)
    construct_signatures: list[SignatureDescription] = Field(default_factory=list)
    constraint: ResolvedTypeDescription | None = None
    default: ResolvedTypeDescription | None = None

    @model_validator(mode="before")
    @classmethod
    def expand_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            if data in KEYWORD_NAMES:
                return {"flags": [data], "display": data}
            return {"flags": ["object"], "display": data, "ref": data}
        return data


class HeritageDescription(_Description):
    token: Literal["extends", "implements"]
    types: list[TypeNodeDescription] = Field(default_factory=list)


class DeclarationDescription(_Description):
    kind: DeclarationKind
    name: str = ""
    has_body: bool = False
    type_node: TypeNodeDescription | None = Field(default=None, alias="type")
    resolved: ResolvedTypeDescription | None = None
    return_resolved: ResolvedTypeDescription | None = None
    initializer: str | None = None
    arrow_function: DeclarationDescription | None = None
    modifiers: list[str] = Field(default_factory=list)
    optional: bool = False
    rest: bool = False
    parameters: list[DeclarationDescription] = Field(default_factory=list)
    type_parameters: list[DeclarationDescription] = Field(default_factory=list)
    constraint: TypeNodeDescription | None = None
    default: TypeNodeDescription | None = None
    heritage: list[HeritageDescription] = Field(default_factory=list)
    comments: list[str] = Field(default_factory=list)
    value: str | int | float | None = None
    signature: bool = Field(
        default=True,
        description="False makes signature lookups for this declaration fail.",
    )
    undeclared: bool = Field(
        default=False,
        description="For parameters: the parameter symbol has no value declaration.",
    )

    @model_validator(mode="before")
    @classmethod
    def expand_comment(cls, data: Any) -> Any:
        if isinstance(data, dict) and "comment" in data:
            data = dict(data)
            comment = data.pop("comment")
            data["comments"] = [*data.get("comments", []), comment]
        return data

    @field_validator("modifiers")
    @classmethod
    def lower_modifiers(cls, v: list[str]) -> list[str]:
        return [m.lower() for m in v]


class SymbolDescription(_Description):
    name: str
    id: str | None = None
    flags: list[Literal["alias", "optional", "const_enum", "type_parameter"]] = Field(
        default_factory=list
    )
    alias: str | None = Field(default=None, description="Symbol id this symbol re-exports.")
    declarations: list[DeclarationDescription] = Field(default_factory=list)
    members: list[SymbolDescription] = Field(default_factory=list)
    exports: list[SymbolDescription] = Field(default_factory=list)


class FileDescription(_Description):
    path: str
    entry: bool = True
    comments: list[str] = Field(default_factory=list)
    exports: list[SymbolDescription] = Field(default_factory=list)


class ProgramDescription(_Description):
    name: str = ""
    root_dir: str = ""
    files: list[FileDescription] = Field(default_factory=list)


for _model in (
    TypeNodeDescription,
    SignatureDescription,
    ResolvedTypeDescription,
    DeclarationDescription,
    SymbolDescription,
):
    _model.model_rebuild()
