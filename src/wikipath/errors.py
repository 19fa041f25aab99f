"""
Exception types raised while fetching, extracting and searching.
"""
from __future__ import annotations

from typing import Optional


class CrawlError(Exception):
    """Base class for all crawler errors."""


class FetchFailure(CrawlError):
    """Raised when a page could not be retrieved."""
    def __init__(self, uri: str, reason: str):
        self.uri = uri
        self.reason = reason
        super().__init__(f"failed to fetch {uri}: {reason}")


class ExtractionError(CrawlError):
    """Base class for errors raised while scanning a page for links."""


class SelectorNotFound(ExtractionError):
    """Raised when the stream ends before the container element is found."""
    def __init__(self, selector):
        self.selector = selector
        super().__init__(f"requested element {selector} not found")


class StructuralMismatch(ExtractionError):
    """Raised when a closing tag does not balance the open tag stack."""
    def __init__(self, expected: Optional[str], found: str):
        self.expected = expected
        self.found = found
        if expected is None:
            message = f"closing tag </{found}> but tag stack is already empty"
        else:
            message = f"closing tag </{found}> does not match open tag <{expected}>"
        super().__init__(message)


class MalformedMarkup(ExtractionError):
    """Raised when the tokenizer rejects the markup it was fed."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"unparseable markup: {reason}")


class StreamError(ExtractionError):
    """Raised when the underlying document stream fails while being read."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"failed to read document stream: {reason}")


class SearchError(CrawlError):
    """Base class for conditions that end a whole search without a path."""
    def __init__(self, message: str, depth: int):
        self.depth = depth
        super().__init__(message)


class MaxHopsExceeded(SearchError):
    """Raised when the hop bound is reached before the target."""
    def __init__(self, max_hops: int):
        self.max_hops = max_hops
        super().__init__(f"reached max hops ({max_hops})", max_hops)


class FrontierExhausted(SearchError):
    """Raised when a layer has no pages left to expand."""
    def __init__(self, depth: int):
        super().__init__(f"no pages left to expand after {depth} hops", depth)
