"""
Shortest link path search between two pages of a wiki.

Crawls pages on demand and runs a breadth-first search over the links
found in each page's main content, bounded by a maximum number of hops.
"""
from wikipath.core import CrawlStats, SearchNode, SearchOutcome, TraversalEngine
from wikipath.crawler import WikiCrawler
from wikipath.errors import (
    CrawlError,
    ExtractionError,
    FetchFailure,
    FrontierExhausted,
    MalformedMarkup,
    MaxHopsExceeded,
    SearchError,
    SelectorNotFound,
    StreamError,
    StructuralMismatch,
)
from wikipath.extract import extract_links
from wikipath.visited import VisitedSet

__version__ = "1.0.0"
__all__ = [
    "WikiCrawler",
    "TraversalEngine",
    "SearchNode",
    "SearchOutcome",
    "CrawlStats",
    "VisitedSet",
    "extract_links",
    "CrawlError",
    "FetchFailure",
    "ExtractionError",
    "SelectorNotFound",
    "StructuralMismatch",
    "MalformedMarkup",
    "StreamError",
    "SearchError",
    "MaxHopsExceeded",
    "FrontierExhausted",
]
