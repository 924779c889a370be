"""
High-level Quotes service.

Public API:
  - QuotesService.page(page=1, limit=None) -> Page
  - QuotesService.iter_quotes(limit=None) -> Iterable[QuoteItem]
  - QuotesService.pager() -> QuotesPageCache (scope-bound stream)
  - QuotesService.raw -> QuotableClient (escape hatch)
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

import requests

from .client import QuotableClient
from .models import QuoteItem
from .options import PagingConfig
from .paging import LoadError, LoadRequest, Page, QuotesPagingSource
from .stream import QuotesPageCache

LOGGER = logging.getLogger(__name__)


class QuotesService:
    """Wires a session, the Quotable client and the paging engine together."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        config: Optional[PagingConfig] = None,
    ):
        self.config = config or PagingConfig()
        self._owns_session = session is None
        self._session = session or requests.Session()
        if self._owns_session:
            self._session.headers.update({"User-Agent": self.config.user_agent})
        self._raw = QuotableClient(
            self._session,
            base_url=self.config.base_url,
            timeout=self.config.timeout,
        )
        self._engine = QuotesPagingSource(self._raw)

    @property
    def raw(self) -> QuotableClient:
        return self._raw

    @property
    def engine(self) -> QuotesPagingSource:
        return self._engine

    def page(self, page: Optional[int] = None, *, limit: Optional[int] = None) -> Page:
        """Load a single page, raising the underlying error on failure."""
        page_size = self.config.page_size if limit is None else limit
        result = self._engine.load(LoadRequest(cursor=page, page_size=page_size))
        if isinstance(result, LoadError):
            raise result.cause
        return result

    def iter_quotes(self, *, limit: Optional[int] = None) -> Iterator[QuoteItem]:
        """
        Walk pages forward from the first one until an empty page.
        Stops early after ``limit`` items when given.
        """
        if limit is not None and limit <= 0:
            return
        yielded = 0
        cursor: Optional[int] = None
        while True:
            page = self.page(cursor)
            for item in page.items:
                yield item
                yielded += 1
                if limit is not None and yielded >= limit:
                    LOGGER.debug(
                        "iter_quotes: yielded %d quotes (limit reached)", yielded
                    )
                    return
            if page.next_cursor is None:
                LOGGER.debug("iter_quotes: end of data after %d quotes", yielded)
                return
            cursor = page.next_cursor

    def pager(self) -> QuotesPageCache:
        """A fresh page cache; close it (or use ``with``) when the consumer leaves."""
        return QuotesPageCache(
            self._engine,
            page_size=self.config.page_size,
            prefetch_distance=self.config.effective_prefetch_distance,
            max_workers=self.config.max_workers,
        )

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "QuotesService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
