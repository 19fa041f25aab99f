"""
Streaming link extraction restricted to a page's content container.

The document is tokenized chunk by chunk; no tree is built. Scanning starts
at the opening tag of the container and stops at the closing tag that
balances it, so nothing outside the container is ever inspected.
"""
from __future__ import annotations

import codecs
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from html.parser import HTMLParser
from typing import BinaryIO, Callable, Deque, Iterator, List, Optional, Pattern, Tuple

from bs4.dammit import EncodingDetector
from urllib3.exceptions import HTTPError as Urllib3HTTPError

from wikipath.config import CONTENT_LINK_PATTERN, DEFAULT_CHUNK_SIZE, DEFAULT_SELECTOR, Selector
from wikipath.errors import MalformedMarkup, SelectorNotFound, StreamError, StructuralMismatch
from wikipath.visited import VisitedSet

log = logging.getLogger("wikipath")

LinkFormatter = Callable[[str], str]

# Elements that never have content and therefore never get a closing tag
VOID_ELEMENTS: frozenset[str] = frozenset((
    "area", "base", "br", "col", "embed", "hr", "img",
    "input", "link", "meta", "param", "source", "track", "wbr",
))


class TokenType(Enum):
    START_TAG = "start"
    END_TAG = "end"
    SELF_CLOSING_TAG = "self-closing"


@dataclass(slots=True)
class Token:
    """A single tag token. Text, comments and doctypes are not tokenized."""
    type: TokenType
    name: str
    attrs: List[Tuple[str, Optional[str]]] = field(default_factory=list)

    def attr(self, key: str) -> Optional[str]:
        for name, value in self.attrs:
            if name == key:
                return value
        return None


class _TagTokenizer(HTMLParser):
    """Incremental tokenizer queueing tag tokens as they are recognized."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.pending: Deque[Token] = deque()

    def handle_starttag(self, tag, attrs):
        kind = TokenType.SELF_CLOSING_TAG if tag in VOID_ELEMENTS else TokenType.START_TAG
        self.pending.append(Token(kind, tag, attrs))

    def handle_startendtag(self, tag, attrs):
        self.pending.append(Token(TokenType.SELF_CLOSING_TAG, tag, attrs))

    def handle_endtag(self, tag):
        if tag in VOID_ELEMENTS:
            return
        self.pending.append(Token(TokenType.END_TAG, tag))


def sniff_encoding(head: bytes) -> str:
    """Pick a codec for a document from its first bytes: BOM, then declared charset, then UTF-8."""
    _, bom_encoding = EncodingDetector.strip_byte_order_mark(head)
    declared = EncodingDetector.find_declared_encoding(head, is_html=True)
    for candidate in (bom_encoding, declared):
        if not candidate:
            continue
        try:
            return codecs.lookup(candidate).name
        except LookupError:
            log.debug("Ignoring unknown document encoding %r", candidate)
    return "utf-8"


def _read(body: BinaryIO, size: int) -> bytes:
    try:
        return body.read(size)
    except (OSError, Urllib3HTTPError) as e:
        raise StreamError(str(e)) from e


def _drain(pending: Deque[Token]) -> Iterator[Token]:
    while pending:
        yield pending.popleft()


def _feed(tokenizer: _TagTokenizer, data: str, final: bool) -> Optional[AssertionError]:
    # html.parser reports declarations it cannot parse (e.g. "<![foo[") with AssertionError
    try:
        tokenizer.feed(data)
        if final:
            tokenizer.close()
    except AssertionError as e:
        return e
    return None


def iter_tokens(body: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[Token]:
    """
    Yield tag tokens from a binary stream in document order.

    The stream is read lazily, one chunk at a time; abandoning the iterator
    leaves the remainder of the stream unread. Markup the tokenizer rejects
    raises MalformedMarkup, but only after every token recognized before it
    has been yielded.
    """
    tokenizer = _TagTokenizer()
    decoder = None

    while True:
        chunk = _read(body, chunk_size)
        if decoder is None:
            decoder = codecs.getincrementaldecoder(sniff_encoding(chunk))(errors="replace")

        final = not chunk
        failure = _feed(tokenizer, decoder.decode(chunk, final=final), final)
        yield from _drain(tokenizer.pending)
        if failure is not None:
            raise MalformedMarkup(str(failure)) from failure
        if final:
            return


def seek_element(tokens: Iterator[Token], selector: Selector) -> Token:
    """Advance *tokens* up to and including the first opening tag matching *selector*."""
    for token in tokens:
        if token.type is TokenType.END_TAG or token.name != selector.element:
            continue
        if token.attr(selector.key) == selector.value:
            return token
    raise SelectorNotFound(selector)


def _pop_matching(stack: List[str], name: str) -> None:
    if not stack:
        raise StructuralMismatch(None, name)
    if stack[-1] != name:
        raise StructuralMismatch(stack[-1], name)
    stack.pop()


def _scan_container(
    tokens: Iterator[Token],
    container: Token,
    visited: VisitedSet,
    formatter: LinkFormatter,
    link_pattern: Pattern[str],
) -> List[str]:
    links: List[str] = []
    seen = set()
    stack = [container.name]

    for token in tokens:
        if token.type is TokenType.END_TAG:
            _pop_matching(stack, token.name)
            if not stack:
                return links
            continue

        if token.type is TokenType.START_TAG:
            stack.append(token.name)
        if token.name != "a":
            continue

        for key, value in token.attrs:
            if key != "href" or not value or not link_pattern.match(value):
                continue
            uri = formatter(value)
            if uri in seen or uri in visited:
                continue
            seen.add(uri)
            links.append(uri)

    log.debug("Document ended before <%s> container was closed", container.name)
    return links


def extract_links(
    body: BinaryIO,
    visited: VisitedSet,
    formatter: LinkFormatter,
    selector: Selector = DEFAULT_SELECTOR,
    link_pattern: Pattern[str] = CONTENT_LINK_PATTERN,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> List[str]:
    """
    Return the new content links found inside the container matching *selector*.

    Links are formatted into canonical URIs by *formatter*; a URI already in
    *visited* is skipped, every returned URI has been added to *visited*.
    Links come back in document order. When extraction fails *visited* is
    left as it was.

    Raises:
        SelectorNotFound: the stream ended before the container was found.
        StructuralMismatch: a closing tag did not match the open tag stack.
        MalformedMarkup: the tokenizer rejected markup before the container closed.
        StreamError: reading *body* failed.
    """
    tokens = iter_tokens(body, chunk_size)
    container = seek_element(tokens, selector)
    if container.type is TokenType.SELF_CLOSING_TAG:
        return []

    links = _scan_container(tokens, container, visited, formatter, link_pattern)
    for uri in links:
        visited.add(uri)
        log.debug("Enqueuing discovered link %s", uri)
    return links
