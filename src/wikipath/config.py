"""
Configuration defaults, the content container selector and link patterns.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern

DEFAULT_MAX_HOPS = 20
DEFAULT_LOG_LEVEL = "info"
DEFAULT_TIMEOUT = 15.0
DEFAULT_USER_AGENT = "WikiPath/1.0 (+shortest link path search)"
DEFAULT_CHUNK_SIZE = 64 * 1024

CONTENT_PREFIX = "/wiki/"

# Letters, digits, underscore, hyphen, parentheses and hash only
_SAFE_LINK_CHARS = r"[A-Za-z0-9_\-#()]"


@dataclass(frozen=True, slots=True)
class Selector:
    """Element type plus one attribute key/value identifying the content container."""
    element: str
    key: str
    value: str

    def __str__(self) -> str:
        return f"{self.element}[{self.key}={self.value}]"


DEFAULT_SELECTOR = Selector("div", "id", "bodyContent")


def content_link_pattern(prefix: str = CONTENT_PREFIX) -> Pattern[str]:
    """Pattern admitting only well-formed internal content links below *prefix*."""
    return re.compile(rf"^{re.escape(prefix)}{_SAFE_LINK_CHARS}+$")


def excluded_namespace_pattern(prefix: str = CONTENT_PREFIX) -> Pattern[str]:
    """Pattern matching namespaced (special/meta) pages such as ``/wiki/File:x``."""
    return re.compile(rf"^{re.escape(prefix)}[A-Za-z]+:.*")


CONTENT_LINK_PATTERN = content_link_pattern()
EXCLUDED_NAMESPACE_PATTERN = excluded_namespace_pattern()


@dataclass(slots=True)
class CrawlerConfig:
    """Settings for one crawler instance."""
    max_hops: int = DEFAULT_MAX_HOPS
    selector: Selector = DEFAULT_SELECTOR
    content_prefix: str = CONTENT_PREFIX
    timeout_s: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    chunk_size: int = DEFAULT_CHUNK_SIZE
    link_pattern: Optional[Pattern[str]] = None
    excluded_pattern: Optional[Pattern[str]] = None

    def __post_init__(self) -> None:
        default_prefix = self.content_prefix == CONTENT_PREFIX
        if self.link_pattern is None:
            self.link_pattern = CONTENT_LINK_PATTERN if default_prefix else content_link_pattern(self.content_prefix)
        if self.excluded_pattern is None:
            self.excluded_pattern = (
                EXCLUDED_NAMESPACE_PATTERN if default_prefix else excluded_namespace_pattern(self.content_prefix)
            )

    @classmethod
    def from_args(cls, args) -> "CrawlerConfig":
        """Build a config from parsed command-line arguments."""
        return cls(
            max_hops=args.max_hops,
            timeout_s=args.timeout,
            user_agent=args.user_agent,
        )

