"""
Cursor-based paging over the Quotable API.

A cursor is a 1-based page number. ``QuotesPagingSource.load`` turns one
LoadRequest into one LoadResult and never raises for remote failures: they
come back as ``LoadError`` values so a stream consumer can keep going.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple, Union

from .mapper import map_records
from .models.dto import QuoteItem
from .models.wire import RawQuotePage

LOGGER = logging.getLogger(__name__)

FIRST_CURSOR = 1


class QuoteSource(Protocol):
    def get_quotes(self, *, page: int, limit: int) -> RawQuotePage: ...


@dataclass(frozen=True)
class LoadRequest:
    cursor: Optional[int]
    page_size: int

    def __post_init__(self) -> None:
        if self.cursor is not None and self.cursor < FIRST_CURSOR:
            raise ValueError(f"cursor must be >= {FIRST_CURSOR}, got {self.cursor}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")

    @property
    def page(self) -> int:
        return FIRST_CURSOR if self.cursor is None else self.cursor


@dataclass(frozen=True)
class Page:
    """A successfully loaded page; ``next_cursor`` is None at end of data."""

    items: Tuple[QuoteItem, ...]
    prev_cursor: Optional[int]
    next_cursor: Optional[int]

    @property
    def is_end(self) -> bool:
        return self.next_cursor is None


@dataclass(frozen=True)
class LoadError:
    cause: BaseException


LoadResult = Union[Page, LoadError]


class QuotesPagingSource:
    """Stateless loader mapping cursors to pages of QuoteItem."""

    def __init__(self, source: QuoteSource):
        self._source = source

    def load(self, request: LoadRequest) -> LoadResult:
        page = request.page
        LOGGER.debug("Loading page %d (page_size=%d)", page, request.page_size)
        try:
            raw = self._source.get_quotes(page=page, limit=request.page_size)
        except Exception as e:
            LOGGER.warning("Load of page %d failed: %s", page, e)
            return LoadError(cause=e)

        items = tuple(map_records(raw))
        prev_cursor = None if page == FIRST_CURSOR else page - 1
        next_cursor = page + 1 if items else None
        if next_cursor is None:
            LOGGER.info("Page %d is empty; end of data.", page)
        return Page(items=items, prev_cursor=prev_cursor, next_cursor=next_cursor)

    def refresh_anchor(self, position: Optional[int]) -> Optional[int]:
        """Cursor to reload from on refresh: the consumer's position, verbatim."""
        return position
