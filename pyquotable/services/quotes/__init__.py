"""Public API for the Quotes service."""

from .client import (
    QuotableClient,
    QuotesApiError,
    QuotesDecodeError,
    QuotesError,
    QuotesNetworkError,
    QuotesRateLimited,
)
from .models import QuoteItem, RawQuotePage, RawQuoteRecord
from .options import PagingConfig
from .paging import LoadError, LoadRequest, LoadResult, Page, QuotesPagingSource
from .service import QuotesService
from .stream import LoadFailed, PageSnapshot, QuotesPageCache, Subscription

__all__ = [
    "QuotesService",
    "QuotableClient",
    "QuotesPagingSource",
    "QuotesPageCache",
    "Subscription",
    "PageSnapshot",
    "LoadFailed",
    "LoadRequest",
    "LoadResult",
    "LoadError",
    "Page",
    "QuoteItem",
    "RawQuotePage",
    "RawQuoteRecord",
    "PagingConfig",
    "QuotesError",
    "QuotesNetworkError",
    "QuotesDecodeError",
    "QuotesApiError",
    "QuotesRateLimited",
]
