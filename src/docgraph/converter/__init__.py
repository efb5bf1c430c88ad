"""Conversion engine: semantic model -> reflection tree."""

from docgraph.converter.comments import get_comment_for_nodes, get_raw_comment, parse_comment
from docgraph.converter.context import Context
from docgraph.converter.converter import Converter
from docgraph.converter.events import EventBus
from docgraph.converter.merge import MergeDecision, MergeGroup, classify_merge
from docgraph.converter.registry import (
    KindRegistry,
    OrderedRegistry,
    ReflectionConverter,
    ResolvedTypeConverter,
    TypeNodeConverter,
)

__all__ = [
    "Context",
    "Converter",
    "EventBus",
    "KindRegistry",
    "MergeDecision",
    "MergeGroup",
    "OrderedRegistry",
    "ReflectionConverter",
    "ResolvedTypeConverter",
    "TypeNodeConverter",
    "classify_merge",
    "get_comment_for_nodes",
    "get_raw_comment",
    "parse_comment",
]
