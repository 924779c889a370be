"""Explore the Quotes pager: simulate a reader scrolling through the feed.

Run: python examples/quotes_feed.py --pages 3 [--page-size 10] [--verbose]

A first subscriber renders items as pages arrive and "scrolls" to the last
row after each update. Once it is done, a second subscriber attaches and is
shown the already-aggregated items without any extra requests.
"""

from __future__ import annotations

import argparse
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install

from pyquotable.services.quotes import (
    LoadFailed,
    PagingConfig,
    PageSnapshot,
    QuotesService,
)

install(show_locals=True)

console = Console()

logger = logging.getLogger("quotes.feed")


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Explore the Quotes pager")
    p.add_argument(
        "--pages",
        dest="pages",
        type=int,
        default=3,
        help="How many pages to scroll through (default: 3)",
    )
    p.add_argument(
        "--page-size",
        dest="page_size",
        type=int,
        default=None,
        help="Quotes per page (default: QUOTABLE_PAGE_SIZE or 10)",
    )
    p.add_argument(
        "--verbose",
        dest="verbose",
        action="store_true",
        default=False,
        help="Enable verbose logs",
    )
    return p.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_time=True)],
    )

    config = PagingConfig.from_env(page_size=args.page_size)
    with QuotesService(config=config) as service, service.pager() as cache:
        with cache.attach() as reader:
            cache.load_next()
            rendered = 0
            for event in reader:
                if isinstance(event, LoadFailed):
                    logger.error("Page %d failed: %s", event.cursor, event.cause)
                    break
                for item in event.items[rendered:]:
                    rendered += 1
                    console.print(f"[bold]{rendered:>4}[/bold] {item.content}")
                    console.print(f"      [italic]{item.author}[/italic]")
                    if item.tags:
                        console.print(f"      [dim]{item.display_tags}[/dim]")
                if event.end_reached or len(event.loaded_cursors) >= args.pages:
                    break
                cache.on_scroll(rendered - 1)

        console.rule("Late subscriber")
        with cache.attach() as late:
            (snapshot,) = late.drain()
            if not isinstance(snapshot, PageSnapshot):
                logger.error("Expected a replayed snapshot, got %r", snapshot)
                return
            logger.info(
                "Replayed %d quotes from pages %s",
                len(snapshot.items),
                list(snapshot.loaded_cursors),
            )


if __name__ == "__main__":
    main()
