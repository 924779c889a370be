"""Tests for the cursor-based paging engine."""

import unittest
from unittest.mock import MagicMock

from pyquotable.services.quotes.client import QuotesDecodeError, QuotesNetworkError
from pyquotable.services.quotes.models import QuoteItem, RawQuotePage
from pyquotable.services.quotes.paging import (
    LoadError,
    LoadRequest,
    Page,
    QuotesPagingSource,
)


def _raw_page(page, n, total_pages=50):
    return RawQuotePage.model_validate(
        {
            "count": n,
            "page": page,
            "totalPages": total_pages,
            "totalCount": total_pages * 10,
            "results": [
                {
                    "_id": f"id-{page}-{i}",
                    "author": f"Author {page}.{i}",
                    "authorSlug": f"author-{page}-{i}",
                    "content": f"Quote {page}.{i}",
                    "dateAdded": "2021-01-01",
                    "dateModified": "2021-01-02",
                    "length": 9,
                    "tags": ["Wisdom"],
                }
                for i in range(n)
            ],
        }
    )


class LoadRequestTest(unittest.TestCase):
    def test_absent_cursor_is_first_page(self):
        self.assertEqual(LoadRequest(cursor=None, page_size=10).page, 1)

    def test_rejects_invalid_arguments(self):
        with self.assertRaises(ValueError):
            LoadRequest(cursor=0, page_size=10)
        with self.assertRaises(ValueError):
            LoadRequest(cursor=1, page_size=0)


class QuotesPagingSourceTest(unittest.TestCase):
    """load() and refresh_anchor()."""

    def setUp(self):
        self.source = MagicMock()
        self.engine = QuotesPagingSource(self.source)

    def test_first_page(self):
        self.source.get_quotes.return_value = _raw_page(1, 10)

        result = self.engine.load(LoadRequest(cursor=None, page_size=10))

        self.source.get_quotes.assert_called_once_with(page=1, limit=10)
        self.assertIsInstance(result, Page)
        self.assertEqual(len(result.items), 10)
        self.assertIsNone(result.prev_cursor)
        self.assertEqual(result.next_cursor, 2)
        self.assertEqual(
            result.items[0], QuoteItem("Author 1.0", "Quote 1.0", ("Wisdom",))
        )

    def test_cursor_arithmetic(self):
        for page, size in [(1, 1), (2, 5), (7, 3), (40, 20)]:
            self.source.get_quotes.return_value = _raw_page(page, size)
            result = self.engine.load(LoadRequest(cursor=page, page_size=size))
            self.assertEqual(result.next_cursor, page + 1)
            self.assertEqual(result.prev_cursor, None if page == 1 else page - 1)
            self.source.get_quotes.assert_called_with(page=page, limit=size)

    def test_empty_page_ends_data_regardless_of_total_pages(self):
        self.source.get_quotes.return_value = _raw_page(2, 0, total_pages=99)

        result = self.engine.load(LoadRequest(cursor=2, page_size=10))

        self.assertEqual(result, Page(items=(), prev_cursor=1, next_cursor=None))
        self.assertTrue(result.is_end)

    def test_failure_is_returned_not_raised(self):
        for error in (QuotesNetworkError("offline"), QuotesDecodeError("bad")):
            self.source.get_quotes.side_effect = error
            result = self.engine.load(LoadRequest(cursor=3, page_size=10))
            self.assertIsInstance(result, LoadError)
            self.assertIs(result.cause, error)

    def test_unexpected_failure_is_captured(self):
        self.source.get_quotes.side_effect = KeyError("results")
        result = self.engine.load(LoadRequest(cursor=1, page_size=10))
        self.assertIsInstance(result, LoadError)
        self.assertIsInstance(result.cause, KeyError)

    def test_refresh_anchor_is_identity(self):
        self.assertIsNone(self.engine.refresh_anchor(None))
        self.assertEqual(self.engine.refresh_anchor(0), 0)
        self.assertEqual(self.engine.refresh_anchor(37), 37)


if __name__ == "__main__":
    unittest.main()
