"""Tests for type expressions: display form, cloning and reference resolution."""

import pytest

from docgraph.models.project import ProjectReflection
from docgraph.models.reflections import ClassReflection, FunctionReflection, ModuleReflection
from docgraph.models.types import (
    ArrayType,
    BigIntLiteral,
    ConditionalType,
    ConstructorType,
    IndexedAccessType,
    IntersectionType,
    IntrinsicType,
    LiteralType,
    MappedType,
    ObjectType,
    OptionalModifier,
    PredicateType,
    PropertyType,
    QueryType,
    ReferenceType,
    SignatureParameterType,
    SignatureType,
    TupleType,
    Type,
    TypeOperatorType,
    TypeParameterType,
    UnionType,
)
from docgraph.semantic.model import Symbol

STRING = IntrinsicType("string")
NUMBER = IntrinsicType("number")


class TestStringify:
    """Display form of every composite type."""

    @pytest.mark.parametrize(
        ("type", "expected"),
        [
            (ArrayType(STRING), "string[]"),
            (UnionType([LiteralType(1), LiteralType(2)]), "1 | 2"),
            (ArrayType(UnionType([STRING, NUMBER])), "(string | number)[]"),
            (IntersectionType([STRING, NUMBER]), "string & number"),
            (LiteralType("a"), '"a"'),
            (LiteralType(None), "null"),
            (LiteralType(True), "true"),
            (LiteralType(BigIntLiteral("10", negative=True)), "-10n"),
            (TupleType([STRING, NUMBER]), "[string, number]"),
            (TypeOperatorType(TypeParameterType("T"), "keyof"), "keyof T"),
            (IndexedAccessType(TypeParameterType("T"), LiteralType("a")), 'T["a"]'),
            (
                ConditionalType(TypeParameterType("T"), STRING, LiteralType(1), LiteralType(2)),
                "T extends string ? 1 : 2",
            ),
            (TypeParameterType("T", STRING, LiteralType("x")), 'T extends string = "x"'),
            (PredicateType("x", True, STRING), "asserts x is string"),
        ],
    )
    def test_given_type_when_stringified_then_display_form(self, type: Type, expected: str) -> None:
        assert str(type) == expected

    def test_given_signature_when_stringified_then_arrow_form(self) -> None:
        # Given
        signature = SignatureType(
            [TypeParameterType("T")],
            [SignatureParameterType("a", False, False, TypeParameterType("T"))],
            TypeParameterType("T"),
        )

        # Then
        assert str(signature) == "<T>(a: T) => T"
        assert signature.stringify(True) == "(<T>(a: T) => T)"

    def test_given_object_with_one_signature_when_stringified_then_collapses(self) -> None:
        # Given
        obj = ObjectType([], [SignatureType([], [], STRING)], [])

        # Then
        assert str(obj) == "() => string"

    def test_given_object_with_members_when_stringified_then_member_form(self) -> None:
        # Given
        obj = ObjectType(
            [PropertyType("a", True, True, STRING)],
            [SignatureType([], [SignatureParameterType("x", False, True, NUMBER)], STRING)],
            [ConstructorType([], [], NUMBER)],
        )

        # Then
        assert str(obj) == "{ readonly a?: string; (...x: number): string; new (): number }"

    def test_given_mapped_type_when_stringified_then_modifiers_rendered(self) -> None:
        # Given
        mapped = MappedType(
            OptionalModifier.ADD,
            TypeParameterType("K", TypeOperatorType(TypeParameterType("T"), "keyof")),
            OptionalModifier.REMOVE,
            STRING,
        )

        # Then
        assert str(mapped) == "{ readonly [K in keyof T]-?: string }"


class TestClone:
    """Clones are deep and independent."""

    def test_given_union_when_cloned_then_members_are_new_objects(self) -> None:
        # Given
        union = UnionType([ArrayType(STRING), NUMBER])

        # When
        copy = union.clone()

        # Then
        assert str(copy) == str(union)
        assert copy.types[0] is not union.types[0]


class TestReferenceType:
    """Lazy resolution through the project registry."""

    def _project_with_class(self) -> tuple[ProjectReflection, ClassReflection, Symbol]:
        project = ProjectReflection(0, "p")
        module = ModuleReflection(1, "m")
        project.register(module)
        project.add_child(module)
        symbol = Symbol("Widget")
        cls = ClassReflection(2, "Widget")
        project.register(cls, symbol)
        module.add_child(cls)
        return project, cls, symbol

    def test_given_symbol_target_when_resolved_then_finds_reflection(self) -> None:
        # Given
        project, cls, symbol = self._project_with_class()

        # When
        ref = ReferenceType("Widget", [STRING], symbol, False, project)

        # Then
        assert ref.reflection is cls
        assert str(ref) == "Widget<string>"

    def test_given_removed_target_when_resolved_then_none_without_raising(self) -> None:
        # Given
        project, cls, symbol = self._project_with_class()
        ref = ReferenceType("Widget", [], cls, False, project)

        # When
        project.remove(cls)

        # Then
        assert ref.reflection is None
        assert str(ref) == "Widget"

    def test_given_value_and_type_reflections_when_value_preferred_then_value_chosen(self) -> None:
        # Given
        project, cls, symbol = self._project_with_class()
        function = FunctionReflection(3, "Widget")
        project.register(function, symbol)

        # When
        type_ref = ReferenceType("Widget", [], symbol, False, project)
        value_ref = ReferenceType("Widget", [], symbol, True, project)

        # Then
        assert type_ref.reflection is cls
        assert value_ref.reflection is function

    def test_given_unknown_symbol_when_resolved_then_none(self) -> None:
        # Given
        project, _, _ = self._project_with_class()

        # When
        ref = ReferenceType("Missing", [], Symbol("Missing"), False, project)

        # Then
        assert ref.reflection is None
        assert str(QueryType(ref)) == "typeof Missing"
