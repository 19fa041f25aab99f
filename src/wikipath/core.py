"""
Search tree data structures and the breadth-first traversal engine.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from wikipath.errors import FrontierExhausted, MaxHopsExceeded

log = logging.getLogger("wikipath")


@dataclass(slots=True, eq=False)
class SearchNode:
    """One page in the implicit search tree."""
    uri: str
    predecessor: Optional[SearchNode] = None
    children: List[SearchNode] = field(default_factory=list)

    @property
    def hops(self) -> int:
        """Distance from the root of the tree."""
        count = 0
        node = self.predecessor
        while node is not None:
            count += 1
            node = node.predecessor
        return count

    def __repr__(self) -> str:
        return f"SearchNode(uri={self.uri!r}, hops={self.hops})"


@dataclass(slots=True)
class SearchOutcome:
    """Result of a search; holds the terminal node of the path if one was found."""
    terminal: Optional[SearchNode] = None

    @property
    def found(self) -> bool:
        return self.terminal is not None

    @property
    def hops(self) -> int:
        return self.terminal.hops if self.terminal is not None else 0

    def visited_pages(self) -> List[str]:
        """Return the path as URIs, target first and start last."""
        pages: List[str] = []
        node = self.terminal
        while node is not None:
            pages.append(node.uri)
            node = node.predecessor
        return pages


@dataclass(slots=True)
class CrawlStats:
    """Statistics collected during a search for summary output."""
    pages_fetched: int = 0
    links_discovered: int = 0
    layers_expanded: int = 0
    error_counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def record_error(self, kind: str) -> None:
        self.error_counts[kind] += 1


Expander = Callable[[SearchNode], List[SearchNode]]
LayerCallback = Callable[[int, List[SearchNode]], None]


class TraversalEngine:
    """
    Level-order search over a lazily discovered link graph.

    *expand* turns a node into its children; it is expected to fill in
    ``node.children``, to set each child's predecessor and to never return
    a URI that was produced before. Failures inside *expand* are its own
    business: a node that could not be expanded simply has no children.
    """

    def __init__(self, expand: Expander, on_layer: Optional[LayerCallback] = None) -> None:
        self._expand = expand
        self._on_layer = on_layer

    def search(self, start: str, target: str, max_hops: int) -> SearchOutcome:
        """
        Find the shortest path from *start* to *target* of at most *max_hops* links.

        Every node at distance d is expanded before any node at distance d+1,
        so the first match is a shortest path. Within a layer the search stops
        as soon as a child equal to *target* shows up.

        Raises:
            MaxHopsExceeded: the bound was reached without a match.
            FrontierExhausted: no nodes were left to expand before the bound.
        """
        root = SearchNode(uri=start)
        if start == target:
            return SearchOutcome(terminal=root)

        frontier = [root]
        depth = 0

        while True:
            if depth >= max_hops:
                raise MaxHopsExceeded(max_hops)
            if not frontier:
                raise FrontierExhausted(depth)

            if self._on_layer is not None:
                self._on_layer(depth, frontier)

            next_frontier: List[SearchNode] = []
            for node in frontier:
                for child in self._expand(node):
                    if child.uri == target:
                        log.debug("Found target %s at %d hops", target, depth + 1)
                        return SearchOutcome(terminal=child)
                    next_frontier.append(child)

            frontier = next_frontier
            depth += 1
