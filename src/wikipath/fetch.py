"""
Page fetching over HTTP.
"""
from __future__ import annotations

import logging
from typing import BinaryIO, Optional, Protocol

import requests

from wikipath.config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from wikipath.errors import FetchFailure

log = logging.getLogger("wikipath")

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


class PageFetcher(Protocol):
    def fetch(self, uri: str) -> BinaryIO:
        """Return a readable body stream for *uri* or raise FetchFailure."""
        ...


class ResponseBody:
    """Readable body of a streamed response; closing it hands the connection back to the session."""

    def __init__(self, resp: requests.Response) -> None:
        self._resp = resp
        self.raw = resp.raw

    def read(self, size: int = -1) -> bytes:
        return self.raw.read(size)

    def close(self) -> None:
        self._resp.close()


class HttpFetcher:
    """Fetches pages with a shared ``requests`` session, following redirects."""

    def __init__(
        self,
        timeout_s: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout_s = timeout_s
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent

    def fetch(self, uri: str) -> ResponseBody:
        try:
            resp = self.session.get(uri, timeout=self.timeout_s, allow_redirects=True, stream=True)
        except requests.RequestException as e:
            raise FetchFailure(uri, str(e)) from e

        if not 200 <= resp.status_code < 300:
            resp.close()
            raise FetchFailure(uri, f"HTTP {resp.status_code}")

        content_type = (resp.headers.get("content-type") or "").lower()
        if not any(ct in content_type for ct in HTML_CONTENT_TYPES):
            resp.close()
            raise FetchFailure(uri, f"unsupported content type {content_type or 'unknown'!r}")

        if resp.url != uri:
            log.debug("Redirected %s -> %s", uri, resp.url)

        # Let the raw stream undo gzip/deflate content encodings
        resp.raw.decode_content = True
        return ResponseBody(resp)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
