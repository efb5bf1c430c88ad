"""Tests for the project registry and cascading removal."""

from docgraph.models.kinds import ReflectionKind
from docgraph.models.project import ProjectReflection
from docgraph.models.reflections import (
    ClassReflection,
    ModuleReflection,
    PropertyReflection,
    ReferenceReflection,
)
from docgraph.models.types import IntrinsicType
from docgraph.semantic.model import Symbol


def _build() -> tuple[ProjectReflection, ModuleReflection, ClassReflection, PropertyReflection]:
    project = ProjectReflection(0, "p")
    module = ModuleReflection(1, "m")
    project.register(module)
    project.add_child(module)
    cls = ClassReflection(2, "Widget")
    project.register(cls, Symbol("Widget"))
    module.add_child(cls)
    prop = PropertyReflection(3, "size", IntrinsicType("number"))
    project.register(prop)
    cls.add_child(prop)
    return project, module, cls, prop


class TestRegistry:
    """Lookups by id, symbol and kind."""

    def test_given_registered_reflections_when_looked_up_then_found(self) -> None:
        # Given
        project, module, cls, prop = _build()

        # Then
        assert project.get_by_id(2) is cls
        assert project.get_by_kind(ReflectionKind.CLASS | ReflectionKind.PROPERTY) == [cls, prop]
        assert project.is_alive(module)
        assert set(project.reflections) == {1, 2, 3}

    def test_given_symbol_registered_twice_when_looked_up_then_single_entry(self) -> None:
        # Given
        project = ProjectReflection(0, "p")
        symbol = Symbol("Widget")
        cls = ClassReflection(1, "Widget")

        # When
        project.register(cls, symbol)
        project.register(cls, symbol)

        # Then
        assert project.get_by_symbol(symbol) == [cls]

    def test_given_tree_when_walked_then_depth_first_order(self) -> None:
        # Given
        project, module, cls, prop = _build()

        # When
        walked = list(project.walk())

        # Then
        assert walked == [module, cls, prop]


class TestRemove:
    """Removal cascades to children and references."""

    def test_given_class_with_member_when_removed_then_member_removed_too(self) -> None:
        # Given
        project, module, cls, prop = _build()

        # When
        project.remove(cls)

        # Then
        assert project.get_by_id(2) is None
        assert project.get_by_id(3) is None
        assert not project.is_alive(prop)
        assert module.children == []

    def test_given_reference_to_target_when_target_removed_then_reference_removed(self) -> None:
        # Given
        project, module, cls, _ = _build()
        other = ModuleReflection(4, "other")
        project.register(other)
        project.add_child(other)
        reference = ReferenceReflection(5, "Widget", cls)
        project.register(reference)
        other.add_child(reference)

        # When
        project.remove(cls)

        # Then
        assert project.get_by_id(5) is None
        assert other.children == []

    def test_given_reference_when_removed_then_target_untouched(self) -> None:
        # Given
        project, module, cls, _ = _build()
        reference = ReferenceReflection(4, "Alias", cls)
        project.register(reference)
        module.add_child(reference)

        # When
        project.remove(reference)

        # Then
        assert project.is_alive(cls)
        assert module.children == [cls]

    def test_given_chain_of_references_when_built_then_collapses_to_final_target(self) -> None:
        # Given
        project, module, cls, _ = _build()
        first = ReferenceReflection(4, "A", cls)

        # When
        second = ReferenceReflection(5, "B", first)

        # Then
        assert second.target_id == cls.id

    def test_given_detached_reference_when_resolved_then_none(self) -> None:
        # Given
        _, _, cls, _ = _build()

        # When
        reference = ReferenceReflection(4, "Alias", cls)

        # Then
        assert reference.resolve() is None
