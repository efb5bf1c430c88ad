"""Tests for doc comment discovery and parsing."""

import pytest

from docgraph.converter.comments import get_comment_for_nodes, get_raw_comment, parse_comment
from docgraph.semantic.model import Declaration, DeclarationKind


def _decl(*comments: str, kind: DeclarationKind = DeclarationKind.FUNCTION) -> Declaration:
    return Declaration(kind=kind, comments=list(comments))


class TestParseComment:
    """Summary, body and tags."""

    def test_given_single_line_when_parsed_then_short_text_only(self) -> None:
        # When
        comment = parse_comment("/** A drawable shape. */")

        # Then
        assert comment.short_text == "A drawable shape."
        assert comment.text == ""
        assert comment.tags == []

    def test_given_paragraphs_when_parsed_then_first_is_short_text(self) -> None:
        # Given
        raw = "/**\n * Summary line\n * continues.\n *\n * Body one.\n * Body two.\n */"

        # When
        comment = parse_comment(raw)

        # Then
        assert comment.short_text == "Summary line\ncontinues."
        assert comment.text == "Body one.\nBody two."

    def test_given_param_with_type_and_dash_when_parsed_then_name_and_text(self) -> None:
        # When
        comment = parse_comment("/**\n * @param {number} side - Side length\n */")

        # Then
        (tag,) = comment.tags
        assert tag.tag_name == "param"
        assert tag.param_name == "side"
        assert tag.text == "Side length"

    @pytest.mark.parametrize("tag", ["@return", "@returns", "@Returns"])
    def test_given_return_tag_when_parsed_then_moved_to_returns(self, tag: str) -> None:
        # When
        comment = parse_comment(f"/**\n * Does it.\n * {tag} The area\n */")

        # Then
        assert comment.returns == "The area"
        assert not comment.has_tag("returns")

    def test_given_tag_with_continuation_when_parsed_then_lines_joined(self) -> None:
        # When
        comment = parse_comment("/**\n * @remarks first\n * second\n */")

        # Then
        assert comment.get_tag("remarks").text == "first\nsecond"

    def test_given_tag_inside_fenced_code_when_parsed_then_kept_as_text(self) -> None:
        # Given
        raw = "/**\n * Summary\n *\n * ```ts\n * @decorator()\n * ```\n */"

        # When
        comment = parse_comment(raw)

        # Then
        assert comment.tags == []
        assert "@decorator()" in comment.text

    def test_given_indented_code_line_when_parsed_then_not_a_tag(self) -> None:
        # When
        comment = parse_comment("/**\n * Summary\n *\n *     @notatag\n */")

        # Then
        assert comment.tags == []

    def test_given_mixed_case_tag_when_parsed_then_lowercased(self) -> None:
        assert parse_comment("/** @packageDocumentation */").has_tag("packagedocumentation")


class TestGetRawComment:
    """Which block documents a node."""

    def test_given_plain_comments_only_when_read_then_none(self) -> None:
        assert get_raw_comment(_decl("/* plain */", "// line")) is None

    def test_given_empty_block_when_read_then_not_a_doc_comment(self) -> None:
        assert get_raw_comment(_decl("/**/")) is None

    def test_given_several_blocks_when_read_then_last_one(self) -> None:
        assert get_raw_comment(_decl("/** first */", "/** second */")) == "/** second */"

    def test_given_last_block_documents_file_when_read_then_none(self) -> None:
        assert get_raw_comment(_decl("/** Module. @packageDocumentation */")) is None

    def test_given_file_with_lone_block_when_read_then_treated_as_header(self) -> None:
        # Given
        source_file = _decl("/** Copyright header */", kind=DeclarationKind.SOURCE_FILE)

        # Then
        assert get_raw_comment(source_file) is None

    def test_given_file_with_two_blocks_when_read_then_first(self) -> None:
        # Given
        source_file = _decl("/** Header */", "/** Other */", kind=DeclarationKind.SOURCE_FILE)

        # Then
        assert get_raw_comment(source_file) == "/** Header */"

    def test_given_file_with_package_documentation_when_read_then_that_block(self) -> None:
        # Given
        source_file = _decl(
            "/** License */",
            "/** Docs\n * @packageDocumentation\n */",
            kind=DeclarationKind.SOURCE_FILE,
        )

        # Then
        assert "Docs" in get_raw_comment(source_file)


class TestGetCommentForNodes:
    """Choosing one comment among merged declarations."""

    def test_given_no_comments_when_selected_then_none(self) -> None:
        assert get_comment_for_nodes([_decl(), _decl()]) is None

    def test_given_two_comments_when_selected_then_longest(self) -> None:
        # When
        comment = get_comment_for_nodes([_decl("/** Long description here */"), _decl("/** Short */")])

        # Then
        assert comment.short_text == "Long description here"

    def test_given_equal_lengths_when_selected_then_earlier_one(self) -> None:
        # When
        comment = get_comment_for_nodes([_decl("/** AAAA */"), _decl("/** BBBB */")])

        # Then
        assert comment.short_text == "AAAA"

    def test_given_preferred_tag_when_selected_then_preferred_wins(self) -> None:
        # When
        comment = get_comment_for_nodes(
            [_decl("/** Much longer comment that loses */"), _decl("/** Mine @preferred */")]
        )

        # Then
        assert comment.short_text.startswith("Mine")
