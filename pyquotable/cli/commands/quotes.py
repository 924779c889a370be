"""Quotes commands for the pyquotable CLI."""

from typing import Iterable, Optional

import typer
from rich.console import Console
from rich.table import Table

from pyquotable.cli.utils.service import get_service
from pyquotable.services.quotes import LoadFailed, QuoteItem

app = typer.Typer(help="Quotes commands")
console = Console()


def _quotes_table(items: Iterable[QuoteItem], start: int = 1) -> Table:
    table = Table("#", "Author", "Quote", "Tags")
    for i, item in enumerate(items, start=start):
        table.add_row(str(i), item.author, item.content, item.display_tags)
    return table


@app.command("page")
def show_page(
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page number"),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-l", min=1, help="Quotes per page"
    ),
):
    """Show a single page of quotes."""
    service = get_service(page_size=limit)

    try:
        result = service.page(page)
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)
    finally:
        service.close()

    if not result.items:
        console.print(f"No quotes on page {page}")
    else:
        start = (page - 1) * service.config.page_size + 1
        console.print(_quotes_table(result.items, start=start))
    console.print(
        f"prev: [bold]{result.prev_cursor or '-'}[/bold]  "
        f"next: [bold]{result.next_cursor or '-'}[/bold]"
    )


@app.command("list")
def list_quotes(
    page_size: Optional[int] = typer.Option(
        None, "--page-size", "-s", min=1, help="Quotes fetched per request"
    ),
    max_items: int = typer.Option(
        20, "--max", "-n", min=1, help="Stop after this many quotes"
    ),
):
    """Stream quotes page by page until --max quotes or the end of data."""
    service = get_service(page_size=page_size)
    shown = 0

    try:
        with service.pager() as cache, cache.attach() as sub:
            cache.load_next()
            for event in sub:
                if isinstance(event, LoadFailed):
                    console.print(
                        f"[bold red]Error:[/bold red] page {event.cursor}: "
                        f"{str(event.cause)}"
                    )
                    raise typer.Exit(1)

                fresh = event.items[shown:max_items]
                if fresh:
                    console.print(_quotes_table(fresh, start=shown + 1))
                    shown += len(fresh)
                if shown >= max_items or event.end_reached:
                    break
                # Pretend the reader scrolled to the last rendered row.
                cache.on_scroll(shown - 1)
    finally:
        service.close()

    if not shown:
        console.print("No quotes found")
