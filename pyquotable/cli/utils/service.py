"""Service construction and logging setup for the pyquotable CLI."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from pyquotable.services.quotes import PagingConfig, QuotesService

console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Route library logs through Rich; DEBUG when ``verbose``."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                markup=False,
                show_time=True,
                log_time_format="%H:%M:%S",
            )
        ],
        force=True,
    )


def get_service(
    page_size: Optional[int] = None, base_url: Optional[str] = None
) -> QuotesService:
    """Build a QuotesService from QUOTABLE_* env vars plus CLI overrides."""
    config = PagingConfig.from_env(page_size=page_size, base_url=base_url)
    return QuotesService(config=config)
