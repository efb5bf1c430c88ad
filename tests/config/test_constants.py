"""Tests for config/constants.py module.

Covers:
- Sort order names map to reflection kinds
- Tag sets used by the comment plugin
"""

from __future__ import annotations

from docgraph.config.constants import (
    BASE_WORKER_ORDER,
    BLACKLISTED_TAGS,
    DEFAULT_SORT_ORDER,
    HIDDEN_TAGS,
    VISIBILITY_TAGS,
)
from docgraph.models.kinds import kind_from_string


class TestSortOrder:
    def test_every_name_is_a_reflection_kind(self) -> None:
        assert all(kind_from_string(name) is not None for name in DEFAULT_SORT_ORDER)

    def test_names_are_unique(self) -> None:
        assert len(set(DEFAULT_SORT_ORDER)) == len(DEFAULT_SORT_ORDER)


class TestTags:
    def test_tag_names_have_no_prefix(self) -> None:
        for tag in (*HIDDEN_TAGS, *BLACKLISTED_TAGS, *VISIBILITY_TAGS):
            assert not tag.startswith("@")
            assert tag == tag.lower()

    def test_base_worker_runs_first(self) -> None:
        assert BASE_WORKER_ORDER < 0
