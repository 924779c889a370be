#!/usr/bin/env python
"""Command line interface for pyquotable."""

import typer

from pyquotable.cli.commands import quotes
from pyquotable.cli.utils.service import configure_logging

app = typer.Typer(help="Browse quotes from the Quotable API")

# Add command groups
app.add_typer(quotes.app, name="quotes")


@app.callback()
def callback(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging"
    ),
):
    """Browse quotes from the Quotable API, page by page."""
    configure_logging(verbose)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
