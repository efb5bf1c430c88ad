"""Per-run reflection id allocation."""

from __future__ import annotations


class IdAllocator:
    """Hands out reflection ids in creation order, starting at 0.

    One allocator belongs to one conversion run. Two runs over identical input
    with fresh (or reset) allocators assign identical ids.
    """

    __slots__ = ("_next",)

    def __init__(self, start: int = 0) -> None:
        self._next = start

    def next_id(self) -> int:
        current = self._next
        self._next += 1
        return current

    def reset(self) -> None:
        self._next = 0

    @property
    def peek(self) -> int:
        """The id the next call to next_id will return."""
        return self._next
