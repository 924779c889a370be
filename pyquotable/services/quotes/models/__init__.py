"""Public exports for Quotes service data models."""

from __future__ import annotations

from .dto import QuoteItem
from .wire import RawQuotePage, RawQuoteRecord

__all__ = [
    "QuoteItem",
    "RawQuotePage",
    "RawQuoteRecord",
]
