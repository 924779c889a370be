"""Projection of raw Quotable records onto display items."""

from __future__ import annotations

from typing import List, Optional

from .models.dto import QuoteItem
from .models.wire import RawQuotePage, RawQuoteRecord


def map_record(record: RawQuoteRecord) -> QuoteItem:
    """Keep author, content and tags; every other raw field is dropped."""
    return QuoteItem(
        author=record.author,
        content=record.content,
        tags=tuple(record.tags),
    )


def map_records(page: Optional[RawQuotePage]) -> List[QuoteItem]:
    if page is None or not page.results:
        return []
    return [map_record(rec) for rec in page.results]
