"""Comment post-processing.

Runs on every created reflection, after the converter has attached the
parsed comment:

- ``@hidden`` / ``@ignore`` (and ``@internal`` with strip_internal) remove
  the reflection from the project.
- Blacklisted tags and the configured ``exclude_tags`` are dropped; they
  restate what the declaration already says.
- ``@private`` / ``@protected`` / ``@public`` on a property, accessor or
  method set its visibility and are then dropped.
- Modules lose their ``@packageDocumentation`` marker.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from docgraph.config.constants import (
    BLACKLISTED_TAGS,
    HIDDEN_TAGS,
    INTERNAL_TAG,
    PACKAGE_DOCUMENTATION_TAG,
    VISIBILITY_TAGS,
)
from docgraph.core.logging import get_logger
from docgraph.models.kinds import MEMBER_KINDS
from docgraph.models.reflections import ModuleReflection, Reflection, Visibility

if TYPE_CHECKING:
    from docgraph.converter.converter import Converter

log = get_logger("plugins.comment")

_PACKAGE_DOCUMENTATION = PACKAGE_DOCUMENTATION_TAG.lstrip("@").lower()


class CommentPlugin:
    name = "comment"

    def __init__(self) -> None:
        self.strip_internal = False
        self.removed_tags: tuple[str, ...] = BLACKLISTED_TAGS

    def register(self, converter: Converter) -> None:
        self.strip_internal = converter.config.strip_internal
        self.removed_tags = BLACKLISTED_TAGS + tuple(converter.config.exclude_tags)
        converter.events.on(converter.EVENT_MODULE_CREATED, self.on_module_created)
        converter.events.on(converter.EVENT_REFLECTION_CREATED, self.on_reflection_created)

    def is_hidden(self, reflection: Reflection) -> bool:
        comment = reflection.comment
        if comment is None:
            return False
        if any(comment.has_tag(tag) for tag in HIDDEN_TAGS):
            return True
        return self.strip_internal and comment.has_tag(INTERNAL_TAG)

    def on_module_created(self, module: ModuleReflection, source_file: object) -> None:
        if module.comment is not None:
            module.comment.remove_tags(_PACKAGE_DOCUMENTATION)
            self._remove_tags(module)

    def on_reflection_created(self, reflection: Reflection, symbol: object, nodes: object) -> None:
        project = reflection.project
        if self.is_hidden(reflection) and project is not None:
            log.debug("comment.hidden", reflection=reflection.get_full_name())
            project.remove(reflection)
            return

        self._remove_tags(reflection)
        if reflection.kind_of(MEMBER_KINDS):
            apply_visibility_tags(reflection)

    def _remove_tags(self, reflection: Reflection) -> None:
        if reflection.comment is None:
            return
        for tag in self.removed_tags:
            reflection.comment.remove_tags(tag)


def apply_visibility_tags(reflection: Reflection) -> None:
    """Set visibility from ``@private``/``@protected``/``@public``; the last listed wins."""
    comment = reflection.comment
    if comment is None:
        return
    for tag in VISIBILITY_TAGS:
        if comment.has_tag(tag):
            reflection.visibility = Visibility(tag)  # type: ignore[attr-defined]
    for tag in VISIBILITY_TAGS:
        comment.remove_tags(tag)
