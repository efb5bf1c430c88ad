"""Tests for the declaration merge policy."""

from docgraph.converter.merge import MergeGroup, classify_merge
from docgraph.semantic.model import DeclarationKind as K


class TestClassifyMerge:
    """Grouping of declaration kinds on one symbol."""

    def test_given_class_and_interface_when_classified_then_one_class_group(self) -> None:
        # When
        decision = classify_merge([K.CLASS, K.INTERFACE])

        # Then
        assert decision.groups == (MergeGroup(K.CLASS, (K.CLASS, K.INTERFACE)),)

    def test_given_interface_before_class_when_classified_then_class_still_absorbs(self) -> None:
        # When
        decision = classify_merge([K.INTERFACE, K.CLASS])

        # Then
        assert decision.kinds == (K.CLASS,)
        assert decision.groups[0].node_kinds == (K.CLASS, K.INTERFACE)

    def test_given_getter_and_setter_when_classified_then_one_accessor_group(self) -> None:
        # When
        decision = classify_merge([K.SET_ACCESSOR, K.GET_ACCESSOR])

        # Then
        assert decision.groups == (MergeGroup(K.GET_ACCESSOR, (K.GET_ACCESSOR, K.SET_ACCESSOR)),)

    def test_given_lone_setter_when_classified_then_own_group(self) -> None:
        assert classify_merge([K.SET_ACCESSOR]).kinds == (K.SET_ACCESSOR,)

    def test_given_namespace_and_function_when_classified_then_two_groups_in_order(self) -> None:
        # When
        decision = classify_merge([K.FUNCTION, K.NAMESPACE, K.FUNCTION])

        # Then
        assert decision.kinds == (K.FUNCTION, K.NAMESPACE)

    def test_given_no_declarations_when_classified_then_no_groups(self) -> None:
        assert classify_merge([]).groups == ()
