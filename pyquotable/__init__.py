"""Python client for the Quotable API with an incremental paging engine."""

from pyquotable.services.quotes import (
    PagingConfig,
    QuoteItem,
    QuotesPageCache,
    QuotesPagingSource,
    QuotesService,
)

__all__ = [
    "QuotesService",
    "QuotesPagingSource",
    "QuotesPageCache",
    "QuoteItem",
    "PagingConfig",
]
