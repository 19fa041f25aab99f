"""
Crawler that wires page fetching and link extraction into the traversal engine.
"""
from __future__ import annotations

import logging
from contextlib import closing
from typing import List, Optional
from urllib.parse import urlparse

from wikipath.config import CrawlerConfig
from wikipath.core import CrawlStats, SearchNode, SearchOutcome, TraversalEngine
from wikipath.errors import (
    ExtractionError,
    FetchFailure,
    MalformedMarkup,
    SelectorNotFound,
    StreamError,
    StructuralMismatch,
)
from wikipath.extract import extract_links
from wikipath.fetch import HttpFetcher, PageFetcher
from wikipath.visited import VisitedSet

log = logging.getLogger("wikipath")

_ERROR_KINDS = (
    (SelectorNotFound, "selector_not_found"),
    (StructuralMismatch, "structural_mismatch"),
    (MalformedMarkup, "malformed_markup"),
    (StreamError, "stream"),
)


def base_domain(uri: str) -> str:
    """Return ``scheme://host`` of *uri*, used to qualify root-relative links."""
    parsed = urlparse(uri)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"Invalid start URI: {uri}")
    return f"{parsed.scheme}://{parsed.netloc}"


class WikiCrawler:
    """
    Searches for the shortest chain of content links between two pages.

    Pages are fetched one at a time. A page that cannot be fetched or
    scanned contributes no links; the rest of the search carries on.
    """

    def __init__(
        self,
        start_uri: str,
        target_uri: str,
        config: Optional[CrawlerConfig] = None,
        fetcher: Optional[PageFetcher] = None,
    ) -> None:
        self.config = config or CrawlerConfig()
        if self.config.max_hops < 0:
            raise ValueError(f"max hops must not be negative: {self.config.max_hops}")

        self.start_uri = start_uri
        self.target_uri = target_uri
        self.base_domain = base_domain(start_uri)
        self.fetcher = fetcher or HttpFetcher(self.config.timeout_s, self.config.user_agent)
        self.visited = VisitedSet()
        self.stats = CrawlStats()

    @property
    def fetched_pages(self) -> int:
        return self.stats.pages_fetched

    @property
    def discovered_pages(self) -> int:
        return len(self.visited)

    def format_link(self, link: str) -> str:
        return f"{self.base_domain}{link}"

    def close(self) -> None:
        """Release the fetcher's resources, if it holds any."""
        close = getattr(self.fetcher, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "WikiCrawler":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def search_shortest_path(self) -> SearchOutcome:
        """
        Run a breadth-first search from the start page to the target page.

        Returns the outcome holding the terminal node of the path.

        Raises:
            MaxHopsExceeded: no path within the configured number of hops.
            FrontierExhausted: every reachable page was expanded without a match.
        """
        self.visited.add(self.start_uri)
        engine = TraversalEngine(self._expand, on_layer=self._on_layer)
        try:
            return engine.search(self.start_uri, self.target_uri, self.config.max_hops)
        finally:
            self.stats.links_discovered = len(self.visited)

    def _on_layer(self, depth: int, frontier: List[SearchNode]) -> None:
        self.stats.layers_expanded += 1
        log.info(
            "Hop %d: expanding %d pages (%d links discovered, %d pages fetched)",
            depth + 1, len(frontier), len(self.visited), self.stats.pages_fetched,
        )

    def _expand(self, node: SearchNode) -> List[SearchNode]:
        log.debug("Fetching page %s", node.uri)
        self.stats.pages_fetched += 1

        try:
            body = self.fetcher.fetch(node.uri)
        except FetchFailure as e:
            log.error("Failed to retrieve page %s: %s", node.uri, e.reason)
            self.stats.record_error("fetch")
            return node.children

        log.debug("Parsing retrieved page %s", node.uri)
        with closing(body):
            try:
                links = extract_links(
                    body,
                    self.visited,
                    self.format_link,
                    selector=self.config.selector,
                    link_pattern=self.config.link_pattern,
                    chunk_size=self.config.chunk_size,
                )
            except ExtractionError as e:
                log.warning("Skipping links of %s: %s", node.uri, e)
                self.stats.record_error(self._error_kind(e))
                return node.children

        excluded = self.config.excluded_pattern
        for link in links:
            if excluded.match(urlparse(link).path):
                log.debug("Not expanding namespaced page %s", link)
                continue
            node.children.append(SearchNode(uri=link, predecessor=node))

        return node.children

    @staticmethod
    def _error_kind(error: ExtractionError) -> str:
        for error_type, kind in _ERROR_KINDS:
            if isinstance(error, error_type):
                return kind
        return "extraction"
