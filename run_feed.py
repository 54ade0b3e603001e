"""Convenience script for paging through headlines from a running Newsdesk API."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure the src directory is on the Python path so the newsdesk package can be imported
SRC_PATH = Path(__file__).resolve().parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from newsdesk.client import DEFAULT_API_URL, NewsdeskClient  # noqa: E402  (import after path setup)
from newsdesk.config import configure_logging  # noqa: E402
from newsdesk.views import FeedStatus, FeedView  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    """Load up to ``--pages`` pages of headlines and print one line per article."""

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--api-url", default=DEFAULT_API_URL, help="Base URL of the Newsdesk API")
    parser.add_argument("--pages", type=int, default=1, help="Number of pages to load")
    parser.add_argument("--page-size", type=int, default=12)
    args = parser.parse_args(argv)

    configure_logging("WARNING")

    view = FeedView(NewsdeskClient(args.api_url), page_size=args.page_size)
    state = view.load()
    while state.page < args.pages and state.can_load_more:
        state = view.load_more()

    if state.status is FeedStatus.ERRORED:
        logging.error("Could not load headlines: %s", state.error)
        return 1

    for article in state.articles:
        source = article.source.name if article.source and article.source.name else "unknown"
        print(f"[{source}] {article.title} <{article.url}>")
    print(f"Loaded {len(state.articles)} of {state.total_results} articles")
    return 0


if __name__ == "__main__":
    sys.exit(main())
