"""
Pydantic models for the Quotable ``/quotes`` endpoint.

Models for these operations:
    - GET {base_url}/quotes?page=<int>&limit=<int>
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from dateutil.parser import isoparse
from pydantic import Field, field_validator

from ._base import QuotableModel


def _parse_date(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        return isoparse(value)
    except ValueError:
        return None


class RawQuoteRecord(QuotableModel):
    """A single quote as returned by the API."""

    id: str = Field(..., alias="_id")
    """Server-side quote identifier."""
    author: str
    """Display name of the author."""
    author_slug: str
    """URL-safe author key."""
    content: str
    """Quote text."""
    date_added: str
    """ISO date the quote was added (``YYYY-MM-DD``)."""
    date_modified: str
    """ISO date the quote was last modified."""
    length: int
    """Length of ``content`` in characters."""
    tags: List[str] = Field(default_factory=list)
    """Ordered tag names."""

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, v):
        return [] if v is None else v

    @property
    def date_added_at(self) -> Optional[datetime]:
        return _parse_date(self.date_added)

    @property
    def date_modified_at(self) -> Optional[datetime]:
        return _parse_date(self.date_modified)


class RawQuotePage(QuotableModel):
    """One page of ``/quotes`` results."""

    count: int
    """Number of results on this page."""
    page: int
    """1-based page number the server answered with."""
    total_pages: int
    """Total number of pages for the requested limit."""
    total_count: int
    """Total number of quotes across all pages."""
    last_item_index: Optional[int] = None
    """Index of the last item on this page, absent on the final page."""
    results: List[RawQuoteRecord] = Field(default_factory=list)
    """Records on this page, in server order."""

    @field_validator("results", mode="before")
    @classmethod
    def _null_results(cls, v):
        # A null/absent results array is an empty page, not a decode error.
        return [] if v is None else v


__all__ = ["RawQuoteRecord", "RawQuotePage"]
