"""
Deduplication of canonical link identifiers.
"""
from __future__ import annotations

from typing import Iterable, Iterator, Set


class VisitedSet:
    """
    Set of canonical URIs that have already been scheduled for exploration.

    Shared by the link extractor and the traversal engine of one crawler.
    ``add`` checks and marks in a single step; callers that ever expand
    pages concurrently must serialize calls to it.
    """

    def __init__(self, items: Iterable[str] = ()) -> None:
        self._items: Set[str] = set(items)

    def add(self, value: str) -> bool:
        """Mark *value* as visited. Return True if it was already present."""
        if value in self._items:
            return True
        self._items.add(value)
        return False

    def contains(self, value: str) -> bool:
        return value in self._items

    __contains__ = contains

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)
