"""Tests for the Quotes service facade and its configuration."""

import os
import unittest
from unittest.mock import MagicMock, patch

from pyquotable.services.quotes import (
    PagingConfig,
    QuoteItem,
    QuotesNetworkError,
    QuotesPageCache,
    QuotesService,
)


def _payload(page, n):
    return {
        "count": n,
        "page": page,
        "totalPages": 3,
        "totalCount": 25,
        "results": [
            {
                "_id": f"q{page}{i}",
                "author": "Seneca",
                "authorSlug": "seneca",
                "content": f"Line {page}.{i}",
                "dateAdded": "2020-01-01",
                "dateModified": "2020-01-01",
                "length": 8,
                "tags": ["Famous Quotes", "Wisdom"],
            }
            for i in range(n)
        ],
    }


def _session_serving(pages):
    """MagicMock session answering GET /quotes from ``pages`` keyed by page number."""

    def get(url, params=None, timeout=None):
        resp = MagicMock()
        resp.status_code = 200
        resp.json.return_value = _payload(params["page"], pages.get(params["page"], 0))
        return resp

    session = MagicMock()
    session.get.side_effect = get
    return session


class QuotesServiceTest(unittest.TestCase):
    """Tests for QuotesService."""

    def setUp(self):
        self.session = _session_serving({1: 10, 2: 10, 3: 5})
        self.service = QuotesService(
            session=self.session, config=PagingConfig(page_size=10)
        )

    def test_page(self):
        page = self.service.page()
        self.assertEqual(len(page.items), 10)
        self.assertEqual(page.next_cursor, 2)
        self.assertEqual(
            page.items[0],
            QuoteItem("Seneca", "Line 1.0", ("Famous Quotes", "Wisdom")),
        )
        _, kwargs = self.session.get.call_args
        self.assertEqual(kwargs["params"], {"page": 1, "limit": 10})

    def test_page_raises_underlying_error(self):
        import requests

        self.session.get.side_effect = requests.ConnectionError("down")
        with self.assertRaises(QuotesNetworkError):
            self.service.page(2)

    def test_iter_quotes_walks_until_empty_page(self):
        items = list(self.service.iter_quotes())
        self.assertEqual(len(items), 25)
        self.assertEqual(items[-1].content, "Line 3.4")
        pages = [c.kwargs["params"]["page"] for c in self.session.get.call_args_list]
        self.assertEqual(pages, [1, 2, 3, 4])

    def test_iter_quotes_limit(self):
        items = list(self.service.iter_quotes(limit=12))
        self.assertEqual(len(items), 12)
        self.assertEqual(self.session.get.call_count, 2)
        self.assertEqual(list(self.service.iter_quotes(limit=0)), [])

    def test_pager_uses_config(self):
        with self.service.pager() as cache:
            self.assertIsInstance(cache, QuotesPageCache)
            cache.load_next().result(5)
            self.assertEqual(len(cache.items), 10)
        self.assertTrue(cache.closed)

    def test_page_rejects_zero_limit(self):
        with self.assertRaises(ValueError):
            self.service.page(1, limit=0)
        self.session.get.assert_not_called()

    def test_pager_uses_configured_prefetch_distance(self):
        config = PagingConfig(page_size=10, prefetch_distance=2)
        service = QuotesService(session=self.session, config=config)
        with service.pager() as cache:
            cache.load_next().result(5)
            self.assertEqual(cache.on_scroll(5), [])
            (future,) = cache.on_scroll(8)
            future.result(5)
            self.assertEqual(cache.snapshot().loaded_cursors, (1, 2))

    def test_injected_session_is_not_closed(self):
        self.service.close()
        self.session.close.assert_not_called()


class PagingConfigTest(unittest.TestCase):
    def test_defaults(self):
        config = PagingConfig()
        self.assertEqual(config.page_size, 10)
        self.assertEqual(config.base_url, "https://api.quotable.io/")
        self.assertEqual(config.effective_prefetch_distance, 10)

    def test_validation(self):
        with self.assertRaises(ValueError):
            PagingConfig(page_size=0)
        with self.assertRaises(ValueError):
            PagingConfig(max_workers=0)

    def test_from_env(self):
        env = {
            "QUOTABLE_BASE_URL": "http://localhost:4000/",
            "QUOTABLE_PAGE_SIZE": "25",
            "QUOTABLE_TIMEOUT": "2.5",
            "QUOTABLE_MAX_WORKERS": "4",
        }
        with patch.dict(os.environ, env):
            config = PagingConfig.from_env(page_size=5)
        self.assertEqual(config.base_url, "http://localhost:4000/")
        self.assertEqual(config.page_size, 5)
        self.assertEqual(config.timeout, 2.5)
        self.assertEqual(config.max_workers, 4)


if __name__ == "__main__":
    unittest.main()
