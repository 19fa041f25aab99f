"""
Command-line interface for the shortest path search.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from typing import List, Optional

from wikipath.config import DEFAULT_LOG_LEVEL, DEFAULT_MAX_HOPS, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, CrawlerConfig
from wikipath.core import CrawlStats, SearchOutcome
from wikipath.crawler import WikiCrawler
from wikipath.errors import SearchError
from wikipath.log import LOG_LEVELS, setup_logging

log = logging.getLogger("wikipath")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_SEARCH_FAILED = 2


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser reporting usage errors with the bootstrap failure code."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="wikipath",
        description="Find the shortest chain of wiki links leading from one page to another.",
    )
    parser.add_argument("start_uri", help="Page to start from (e.g. https://en.wikipedia.org/wiki/Times_New_Roman)")
    parser.add_argument("target_uri", help="Page to reach")
    parser.add_argument(
        "--max-hops", type=int, default=DEFAULT_MAX_HOPS,
        help=f"Depth of the search (default: {DEFAULT_MAX_HOPS})",
    )
    parser.add_argument(
        "--log-level", default=DEFAULT_LOG_LEVEL, type=str.lower, choices=sorted(LOG_LEVELS),
        help=f"Log level to use (default: {DEFAULT_LOG_LEVEL})",
    )
    parser.add_argument("--log-file", help="Also write full debug output to this file")
    parser.add_argument(
        "--timeout", type=float, default=DEFAULT_TIMEOUT,
        help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON to stdout")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON")
    return parser


def print_summary(stats: CrawlStats) -> None:
    """Print crawl summary to stderr."""
    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write("CRAWL SUMMARY\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"Pages fetched:          {stats.pages_fetched}\n")
    sys.stderr.write(f"Links discovered:       {stats.links_discovered}\n")
    sys.stderr.write(f"Hops expanded:          {stats.layers_expanded}\n\n")

    if stats.error_counts:
        sys.stderr.write("Skipped pages by reason:\n")
        for kind, count in sorted(stats.error_counts.items()):
            sys.stderr.write(f"  {kind.replace('_', ' ')}: {count}\n")
    else:
        sys.stderr.write("No errors encountered.\n")

    sys.stderr.write("\n")


def result_payload(outcome: SearchOutcome, crawler: WikiCrawler, elapsed_ms: int) -> dict:
    return {
        "path": outcome.visited_pages(),
        "hops": outcome.hops,
        "pages_fetched": crawler.fetched_pages,
        "links_discovered": crawler.discovered_pages,
        "elapsed_ms": elapsed_ms,
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the wikipath CLI."""
    args = build_parser().parse_args(argv)

    try:
        setup_logging(args.log_level, args.log_file)
        crawler = WikiCrawler(args.start_uri, args.target_uri, CrawlerConfig.from_args(args))
    except (ValueError, OSError) as e:
        log.error("failed to execute command: %s", e)
        return EXIT_FAILURE

    start = time.monotonic()
    with crawler:
        try:
            outcome = crawler.search_shortest_path()
        except SearchError as e:
            log.error("Failed to resolve shortest path: %s", e)
            print_summary(crawler.stats)
            return EXIT_SEARCH_FAILED
    elapsed_ms = int((time.monotonic() - start) * 1000)

    log.info("Resolved path in %d ms", elapsed_ms)
    for page in outcome.visited_pages():
        log.info("  %s", page)
    log.info("Visited %d pages to find path", crawler.fetched_pages)
    log.info("Discovered %d unique links during search", crawler.discovered_pages)
    print_summary(crawler.stats)

    if args.json:
        payload = result_payload(outcome, crawler, elapsed_ms)
        print(json.dumps(payload, ensure_ascii=False, indent=2 if args.pretty else None))

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
