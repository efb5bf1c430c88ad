"""Parsed documentation comments."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class CommentTag:
    """A single ``@tag`` line of a comment, plus any continuation lines."""

    tag_name: str
    param_name: str | None = None
    text: str = ""

    def clone(self) -> CommentTag:
        return CommentTag(self.tag_name, self.param_name, self.text)


@dataclass
class Comment:
    """A parsed doc comment: a short summary, the remaining text and its tags."""

    short_text: str = ""
    text: str = ""
    returns: str = ""
    tags: list[CommentTag] = field(default_factory=list)

    def has_visible_component(self) -> bool:
        return bool(self.short_text or self.text or self.tags)

    def has_tag(self, tag_name: str) -> bool:
        return any(tag.tag_name == tag_name for tag in self.tags)

    def get_tag(self, tag_name: str, param_name: str | None = None) -> CommentTag | None:
        for tag in self.tags:
            if tag.tag_name == tag_name and (param_name is None or tag.param_name == param_name):
                return tag
        return None

    def remove_tags(self, tag_name: str) -> None:
        self.tags = [tag for tag in self.tags if tag.tag_name != tag_name]

    def clone(self) -> Comment:
        return Comment(self.short_text, self.text, self.returns, [tag.clone() for tag in self.tags])
