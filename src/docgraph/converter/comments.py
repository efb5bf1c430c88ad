"""Doc comment discovery and parsing.

Comments are parsed inside the converter rather than by a plugin so that
listeners of ``reflection_created`` already see them. The comment plugin
post-processes them afterwards.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from docgraph.config.constants import PACKAGE_DOCUMENTATION_TAG, PREFERRED_TAG
from docgraph.models.comments import Comment, CommentTag
from docgraph.semantic.model import Declaration, DeclarationKind

_CODE_FENCE = re.compile(r"^\s*```(?!.*```)")
_TAG_LINE = re.compile(r"^\s*@(\S+)(.*)$")
_TYPE_DATA = re.compile(r"^\{(?!@)[^}]*\}+")
_OPTIONAL_NAME = re.compile(r"^\[[^\[][^\]]*\]+")
_PARAM_TAGS = frozenset({"param", "typeparam", "template"})


def get_comment_for_nodes(nodes: Iterable[Declaration]) -> Comment | None:
    """Pick and parse the comment documenting a group of declarations.

    One raw comment is parsed as is. With several, the first one carrying
    ``@preferred`` wins; otherwise the longest does, and on equal length the
    earlier one.
    """
    comments = [c for c in (get_raw_comment(node) for node in nodes) if c is not None]
    if not comments:
        return None
    if len(comments) == 1:
        return parse_comment(comments[0])

    for comment in comments:
        if PREFERRED_TAG in comment:
            return parse_comment(comment)

    longest = comments[0]
    for other in comments[1:]:
        if len(longest) < len(other):
            longest = other
    return parse_comment(longest)


def _is_doc_block(text: str) -> bool:
    # "/**/" is an empty ordinary comment, not a doc block
    return text.startswith("/**") and not text.startswith("/**/")


def get_raw_comment(node: Declaration) -> str | None:
    """The raw ``/** ... */`` block documenting ``node``, if any.

    For a source file, a block containing ``@packageDocumentation`` is used;
    failing that, the first of several blocks. A lone block at the top of a
    file is assumed to be a license header and ignored. For any other
    declaration the last block is used, unless it documents the whole file.
    """
    comments = [c for c in node.comments if _is_doc_block(c.lstrip())]
    if not comments:
        return None

    if node.kind == DeclarationKind.SOURCE_FILE:
        for comment in comments:
            if PACKAGE_DOCUMENTATION_TAG in comment:
                return comment
        if len(comments) > 1:
            return comments[0]
        return None

    comment = comments[-1]
    if PACKAGE_DOCUMENTATION_TAG in comment:
        return None
    return comment


def _consume_type_data(line: str) -> str:
    line = _TYPE_DATA.sub("", line)
    line = _OPTIONAL_NAME.sub("", line)
    return line.strip()


class _CommentParser:
    """Line-oriented state machine filling one Comment."""

    def __init__(self) -> None:
        self.comment = Comment()
        self._current_tag: CommentTag | None = None
        # 0: before the summary, 1: inside it, 2: past it
        self._short_text = 0
        self._in_fenced_code = False

    def read_line(self, line: str) -> None:
        line = re.sub(r"^\s*\*? ?", "", line, count=1)
        line = line.rstrip()

        if _CODE_FENCE.match(line):
            self._in_fenced_code = not self._in_fenced_code

        # Four leading spaces also mark a code block.
        if not self._in_fenced_code and not line.startswith("    "):
            tag = _TAG_LINE.match(line)
            if tag:
                self._read_tag_line(tag)
                return
        self._read_bare_line(line)

    def _read_bare_line(self, line: str) -> None:
        comment = self.comment
        if self._current_tag is not None:
            self._current_tag.text += "\n" + line
        elif line == "" and self._short_text == 0:
            pass
        elif line == "" and self._short_text == 1:
            self._short_text = 2
        elif self._short_text == 2:
            comment.text += ("" if comment.text == "" else "\n") + line
        else:
            comment.short_text += ("" if comment.short_text == "" else "\n") + line
            self._short_text = 1

    def _read_tag_line(self, tag: re.Match[str]) -> None:
        tag_name = tag.group(1).lower()
        param_name = None
        line = tag.group(2).strip()

        if tag_name == "return":
            tag_name = "returns"
        if tag_name in _PARAM_TAGS:
            line = _consume_type_data(line)
            param = re.match(r"[^\s]+", line)
            if param:
                param_name = param.group(0)
                line = line[len(param_name) + 1 :].strip()
            line = _consume_type_data(line)
            line = re.sub(r"^-\s+", "", line)
        elif tag_name == "returns":
            line = _consume_type_data(line)

        self._current_tag = CommentTag(tag_name, param_name, line)
        self.comment.tags.append(self._current_tag)

    def finish(self) -> Comment:
        comment = self.comment
        for tag in comment.tags:
            if tag.tag_name == "returns":
                comment.returns = tag.text.strip()
        comment.remove_tags("returns")
        comment.short_text = comment.short_text.strip()
        comment.text = comment.text.strip()
        for tag in comment.tags:
            tag.text = tag.text.strip()
        return comment


def parse_comment(text: str) -> Comment:
    """Parse a raw doc comment block into a Comment.

    The first paragraph becomes ``short_text`` and the rest ``text``.
    ``@returns`` (or ``@return``) fills ``returns``; every other ``@tag`` is
    kept as a CommentTag. Lines inside fenced or indented code are never read
    as tags.
    """
    text = re.sub(r"^\s*/\*+", "", text)
    text = re.sub(r"\*+/\s*$", "", text)

    parser = _CommentParser()
    for line in re.split(r"\r\n?|\n", text):
        parser.read_line(line)
    return parser.finish()
