"""
Tests for the search tree structures and the traversal engine.
"""

import unittest

from wikipath.core import CrawlStats, SearchNode, SearchOutcome, TraversalEngine
from wikipath.errors import FrontierExhausted, MaxHopsExceeded
from wikipath.visited import VisitedSet


class GraphExpander:
    """Expands nodes from an in-memory adjacency map, deduplicating like the crawler."""

    def __init__(self, graph, start):
        self.graph = graph
        self.visited = VisitedSet([start])
        self.expanded = []

    def __call__(self, node):
        self.expanded.append(node.uri)
        for uri in self.graph.get(node.uri, []):
            if self.visited.add(uri):
                continue
            node.children.append(SearchNode(uri=uri, predecessor=node))
        return node.children


def shortest_hops(graph, start, target):
    """Reference BFS over a fully known graph."""
    seen = {start}
    layer = [start]
    hops = 0
    while layer:
        if target in layer:
            return hops
        next_layer = []
        for uri in layer:
            for child in graph.get(uri, []):
                if child not in seen:
                    seen.add(child)
                    next_layer.append(child)
        layer = next_layer
        hops += 1
    return None


class TestSearchOutcome(unittest.TestCase):
    def test_empty_outcome(self):
        outcome = SearchOutcome()
        self.assertFalse(outcome.found)
        self.assertEqual(outcome.visited_pages(), [])

    def test_single_node(self):
        outcome = SearchOutcome(SearchNode("https://en.wikipedia.org/wiki/Times_New_Roman"))
        self.assertTrue(outcome.found)
        self.assertEqual(outcome.visited_pages(), ["https://en.wikipedia.org/wiki/Times_New_Roman"])
        self.assertEqual(outcome.hops, 0)

    def test_chain_is_reported_target_first(self):
        root = SearchNode("root")
        a = SearchNode("A", predecessor=root)
        b = SearchNode("B", predecessor=a)
        outcome = SearchOutcome(b)
        self.assertEqual(outcome.visited_pages(), ["B", "A", "root"])
        self.assertEqual(outcome.hops, 2)

    def test_node_repr_does_not_recurse(self):
        root = SearchNode("root")
        child = SearchNode("A", predecessor=root)
        root.children.append(child)
        self.assertEqual(repr(child), "SearchNode(uri='A', hops=1)")


class TestCrawlStats(unittest.TestCase):
    def test_record_error(self):
        stats = CrawlStats()
        stats.record_error("fetch")
        stats.record_error("fetch")
        stats.record_error("stream")
        self.assertEqual(stats.error_counts, {"fetch": 2, "stream": 1})


class TestTraversalEngine(unittest.TestCase):
    def test_three_node_chain(self):
        graph = {"root": ["A"], "A": ["B"]}
        engine = TraversalEngine(GraphExpander(graph, "root"))
        outcome = engine.search("root", "B", max_hops=5)
        self.assertEqual(outcome.visited_pages(), ["B", "A", "root"])

    def test_prefers_shorter_path(self):
        graph = {
            "S": ["A", "B"],
            "A": ["C"],
            "B": ["T"],
            "C": ["T"],
        }
        engine = TraversalEngine(GraphExpander(graph, "S"))
        outcome = engine.search("S", "T", max_hops=5)
        self.assertEqual(outcome.visited_pages(), ["T", "B", "S"])

    def test_target_found_early_in_layer_short_circuits(self):
        graph = {"S": ["A", "B", "C"], "A": ["T"], "B": ["X"], "C": ["Y"]}
        expander = GraphExpander(graph, "S")
        outcome = TraversalEngine(expander).search("S", "T", max_hops=5)
        self.assertEqual(outcome.visited_pages(), ["T", "A", "S"])
        self.assertEqual(expander.expanded, ["S", "A"])

    def test_layers_expanded_in_discovery_order(self):
        graph = {"S": ["A", "B"], "A": ["C"], "B": ["D"], "C": ["T"]}
        expander = GraphExpander(graph, "S")
        TraversalEngine(expander).search("S", "T", max_hops=5)
        self.assertEqual(expander.expanded, ["S", "A", "B", "C"])

    def test_no_node_expanded_twice(self):
        graph = {"S": ["A", "B"], "A": ["B", "S", "C"], "B": ["A", "C"], "C": ["T"]}
        expander = GraphExpander(graph, "S")
        TraversalEngine(expander).search("S", "T", max_hops=5)
        self.assertEqual(len(expander.expanded), len(set(expander.expanded)))

    def test_zero_max_hops(self):
        expander = GraphExpander({"S": ["T"]}, "S")
        with self.assertRaises(MaxHopsExceeded):
            TraversalEngine(expander).search("S", "T", max_hops=0)
        self.assertEqual(expander.expanded, [])

    def test_path_longer_than_bound(self):
        graph = {"S": ["A"], "A": ["B"], "B": ["T"]}
        with self.assertRaises(MaxHopsExceeded) as ctx:
            TraversalEngine(GraphExpander(graph, "S")).search("S", "T", max_hops=2)
        self.assertEqual(ctx.exception.max_hops, 2)

    def test_path_exactly_at_bound(self):
        graph = {"S": ["A"], "A": ["B"], "B": ["T"]}
        outcome = TraversalEngine(GraphExpander(graph, "S")).search("S", "T", max_hops=3)
        self.assertEqual(outcome.hops, 3)

    def test_frontier_exhausted(self):
        graph = {"S": ["A"], "A": []}
        with self.assertRaises(FrontierExhausted) as ctx:
            TraversalEngine(GraphExpander(graph, "S")).search("S", "T", max_hops=10)
        self.assertEqual(ctx.exception.depth, 2)

    def test_start_equals_target(self):
        expander = GraphExpander({}, "S")
        outcome = TraversalEngine(expander).search("S", "S", max_hops=0)
        self.assertEqual(outcome.visited_pages(), ["S"])
        self.assertEqual(expander.expanded, [])

    def test_layer_callback(self):
        graph = {"S": ["A", "B"], "A": ["T"]}
        layers = []
        engine = TraversalEngine(
            GraphExpander(graph, "S"),
            on_layer=lambda depth, frontier: layers.append((depth, [n.uri for n in frontier])),
        )
        engine.search("S", "T", max_hops=5)
        self.assertEqual(layers, [(0, ["S"]), (1, ["A", "B"])])

    def test_matches_reference_bfs_on_grid(self):
        # 4x4 grid with edges right and down; shortest path corner to corner is 6
        graph = {}
        for row in range(4):
            for col in range(4):
                edges = []
                if col < 3:
                    edges.append(f"{row},{col + 1}")
                if row < 3:
                    edges.append(f"{row + 1},{col}")
                graph[f"{row},{col}"] = edges
        expected = shortest_hops(graph, "0,0", "3,3")
        outcome = TraversalEngine(GraphExpander(graph, "0,0")).search("0,0", "3,3", max_hops=20)
        self.assertEqual(expected, 6)
        self.assertEqual(outcome.hops, expected)
        self.assertEqual(len(outcome.visited_pages()), expected + 1)
