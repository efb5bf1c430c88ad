"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
provides program descriptions shared by the converter, serializer and plugin
tests.
"""

import sys
from pathlib import Path
from typing import Any

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local docgraph package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of docgraph modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("docgraph"):
        del sys.modules[module_name]


def _method(name: str, returns: str, *, has_body: bool = True, comment: str | None = None) -> dict[str, Any]:
    declaration: dict[str, Any] = {"kind": "method", "name": name, "has_body": has_body, "type": returns}
    if comment is not None:
        declaration["comment"] = comment
    return declaration


@pytest.fixture
def shapes_program() -> dict[str, Any]:
    """A two-file program exercising merging, overloads, enums and re-exports.

    src/shapes.ts declares Shape (class merged with an interface), Color (enum),
    area (overloaded function), Point (interface) and Id (type alias).
    src/index.ts re-exports Shape and declares VERSION.
    """
    return {
        "name": "shapes",
        "root_dir": "/repo",
        "files": [
            {
                "path": "/repo/src/shapes.ts",
                "comments": [
                    "/** Geometry primitives.\n * @packageDocumentation\n */",
                ],
                "exports": [
                    {
                        "name": "Shape",
                        "declarations": [
                            {
                                "kind": "class",
                                "comment": "/** A drawable shape. */",
                                "modifiers": ["abstract"],
                            },
                            {"kind": "interface", "comment": "/** Merged shape members. */"},
                        ],
                        "members": [
                            {
                                "name": "constructor",
                                "declarations": [
                                    {
                                        "kind": "constructor",
                                        "has_body": True,
                                        "parameters": [
                                            {"kind": "parameter", "name": "name", "type": "string"}
                                        ],
                                    }
                                ],
                            },
                            {
                                "name": "name",
                                "declarations": [
                                    {"kind": "property", "type": "string", "modifiers": ["readonly"]}
                                ],
                            },
                            {
                                "name": "describe",
                                "declarations": [_method("describe", "string", comment="/** Human text. */")],
                            },
                            {
                                "name": "secret",
                                "declarations": [
                                    {"kind": "property", "type": "number", "comment": "/** @hidden */"}
                                ],
                            },
                            {
                                "name": "size",
                                "declarations": [
                                    {"kind": "get_accessor", "type": "number"},
                                    {
                                        "kind": "set_accessor",
                                        "parameters": [{"kind": "parameter", "name": "v", "type": "number"}],
                                    },
                                ],
                            },
                        ],
                    },
                    {
                        "name": "Color",
                        "declarations": [{"kind": "enum", "comment": "/** Paint colors. */"}],
                        "exports": [
                            {"name": "Red", "declarations": [{"kind": "enum_member", "value": 0}]},
                            {"name": "Green", "declarations": [{"kind": "enum_member", "value": 1}]},
                        ],
                    },
                    {
                        "name": "area",
                        "declarations": [
                            {
                                "kind": "function",
                                "comment": "/** Area of a square.\n * @param side - Side length\n * @returns The area\n */",
                                "parameters": [{"kind": "parameter", "name": "side", "type": "number"}],
                                "type": "number",
                            },
                            {
                                "kind": "function",
                                "parameters": [
                                    {"kind": "parameter", "name": "w", "type": "number"},
                                    {"kind": "parameter", "name": "h", "type": "number", "optional": True},
                                ],
                                "type": "number",
                            },
                            {
                                "kind": "function",
                                "has_body": True,
                                "parameters": [
                                    {"kind": "parameter", "name": "a", "type": "number"},
                                    {"kind": "parameter", "name": "b", "type": "number"},
                                ],
                                "type": "number",
                            },
                        ],
                    },
                    {
                        "name": "Point",
                        "declarations": [{"kind": "interface"}],
                        "members": [
                            {"name": "x", "declarations": [{"kind": "property_signature", "type": "number"}]},
                            {"name": "y", "declarations": [{"kind": "property_signature", "type": "number"}]},
                        ],
                    },
                    {
                        "name": "Id",
                        "declarations": [
                            {
                                "kind": "type_alias",
                                "type": {"kind": "union", "types": ["string", "number"]},
                            }
                        ],
                    },
                ],
            },
            {
                "path": "/repo/src/index.ts",
                "exports": [
                    {"name": "Shape", "alias": "/repo/src/shapes.ts:Shape"},
                    {
                        "name": "VERSION",
                        "declarations": [
                            {
                                "kind": "variable",
                                "modifiers": ["const"],
                                "initializer": '"1.0"',
                                "resolved": {"flags": ["string_literal"], "value": "1.0"},
                            }
                        ],
                    },
                ],
            },
        ],
    }


@pytest.fixture
def shapes_model(shapes_program: dict[str, Any]):
    from docgraph.semantic.memory import InMemorySemanticModel

    return InMemorySemanticModel.from_dict(shapes_program)
