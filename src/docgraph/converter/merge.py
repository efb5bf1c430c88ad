"""Declaration merging policy.

A symbol may carry several declarations of different syntactic kinds. This
module decides which converter runs for which declarations, independently of
the rest of the engine.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from docgraph.semantic.model import DeclarationKind

# kind that absorbs -> kinds it absorbs
_FOLDS: dict[DeclarationKind, tuple[DeclarationKind, ...]] = {
    # Classes and interfaces sharing a name document as one class.
    DeclarationKind.CLASS: (DeclarationKind.INTERFACE,),
    # A get/set pair documents as one accessor.
    DeclarationKind.GET_ACCESSOR: (DeclarationKind.SET_ACCESSOR,),
}


@dataclass(frozen=True)
class MergeGroup:
    """One reflection to produce.

    Attributes:
        kind: Declaration kind used to pick the converter.
        node_kinds: Kinds of the declarations handed to that converter, in the
            order they are handed over.
    """

    kind: DeclarationKind
    node_kinds: tuple[DeclarationKind, ...]


@dataclass(frozen=True)
class MergeDecision:
    groups: tuple[MergeGroup, ...]

    @property
    def kinds(self) -> tuple[DeclarationKind, ...]:
        return tuple(group.kind for group in self.groups)


def classify_merge(kinds: Iterable[DeclarationKind]) -> MergeDecision:
    """Group the declaration kinds present on one symbol.

    Kinds keep the order of their first appearance. A class absorbs any
    interface and a getter absorbs any setter; every other kind yields its own
    group.
    """
    present = list(dict.fromkeys(kinds))
    absorbed = {
        folded
        for kind in present
        for folded in _FOLDS.get(kind, ())
    }

    groups = []
    for kind in present:
        if kind in absorbed:
            continue
        folded = tuple(k for k in _FOLDS.get(kind, ()) if k in present)
        groups.append(MergeGroup(kind=kind, node_kinds=(kind, *folded)))
    return MergeDecision(groups=tuple(groups))
