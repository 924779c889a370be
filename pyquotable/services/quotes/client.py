"""
Low-level HTTP client for the Quotable ``/quotes`` endpoint.

This is the remote source behind QuotesPagingSource. It returns typed Pydantic
models from pyquotable.services.quotes.models.wire and hides HTTP details;
every failure surfaces as a QuotesError subclass.
"""

from __future__ import annotations

import json
import logging
import os
import time
from typing import Dict, Optional

import requests
from pydantic import ValidationError

from pyquotable.utils import env_flag

from .models.wire import RawQuotePage
from .options import DEFAULT_BASE_URL

LOGGER = logging.getLogger(__name__)


# ------------------------------- Errors --------------------------------------


class QuotesError(Exception):
    """Base Quotes transport error."""


class QuotesNetworkError(QuotesError):
    """Connectivity problems and timeouts."""


class QuotesDecodeError(QuotesError):
    """Body was not JSON or did not match the expected page shape."""

    def __init__(self, message: str, payload: Optional[object] = None):
        super().__init__(message)
        self.payload = payload


class QuotesApiError(QuotesError):
    """Non-2xx response."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[object] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class QuotesRateLimited(QuotesApiError):
    """429 Too Many Requests."""

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


# ------------------------------- Transport -----------------------------------


class _QuotableHttp:
    """
    Minimal HTTP transport:
      - GET with query params, JSON bodies
      - Maps requests/HTTP failures to QuotesError subclasses
      - Bounded debug dumps (QUOTABLE_DEBUG, QUOTABLE_DEBUG_MAX_BYTES)
    """

    def __init__(
        self,
        base_url: str,
        session: requests.Session,
        timeout: Optional[float] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._session = session
        self._timeout = timeout
        LOGGER.debug("Initialized _QuotableHttp with base_url: %s", self._base_url)

    def get(self, path: str, params: Dict[str, object]) -> object:
        url = f"{self._base_url}{path}"
        LOGGER.info("GET %s params=%s", url, params)
        try:
            resp = self._session.get(url, params=params, timeout=self._timeout)
        except requests.Timeout as e:
            LOGGER.error("GET %s timed out", url)
            raise QuotesNetworkError(f"Timed out fetching {url}") from e
        except requests.RequestException as e:
            LOGGER.error("GET %s failed: %s", url, e)
            raise QuotesNetworkError(f"Request to {url} failed: {e}") from e

        code = getattr(resp, "status_code", 0)
        LOGGER.debug("GET %s returned status %d", url, code)
        if not 200 <= code < 300:
            self._dump_http_debug(path.strip("/"), url, params, resp)
            if code == 429:
                retry_after = None
                hdr = resp.headers.get("Retry-After")
                if hdr:
                    try:
                        retry_after = float(hdr)
                    except ValueError:
                        retry_after = None
                LOGGER.warning(
                    "GET %s was rate-limited. Retry after: %s", url, retry_after
                )
                raise QuotesRateLimited(
                    "HTTP 429: rate limited", retry_after=retry_after
                )
            try:
                body = resp.json()
            except ValueError:
                body = getattr(resp, "text", None)
            LOGGER.error("GET %s failed with code %d", url, code)
            raise QuotesApiError(f"HTTP {code}", status_code=code, payload=body)
        try:
            return resp.json()
        except ValueError as e:
            self._dump_http_debug(path.strip("/"), url, params, resp)
            LOGGER.error("Failed to parse JSON response from %s", url)
            raise QuotesDecodeError(
                "Invalid JSON response", payload=getattr(resp, "text", None)
            ) from e

    @staticmethod
    def _dump_http_debug(op: str, url: str, params: Dict, resp) -> None:
        if not env_flag(os.getenv("QUOTABLE_DEBUG")):
            return
        ts = time.strftime("%Y%m%d-%H%M%S")
        out_dir = os.getenv("QUOTABLE_DEBUG_DIR") or os.path.join(
            "workspace", "quotable_debug"
        )
        path = os.path.join(out_dir, f"{ts}_{op}_http.txt")
        try:
            os.makedirs(out_dir, exist_ok=True)
            status = getattr(resp, "status_code", None)
            headers = getattr(resp, "headers", {})
            body_text = getattr(resp, "text", None)
            with open(path, "w", encoding="utf-8") as f:
                f.write(f"status={status}\nurl={url}\nparams={json.dumps(params)}\n")
                f.write(f"headers={dict(headers)}\n\n")
                if body_text:
                    max_bytes = int(os.getenv("QUOTABLE_DEBUG_MAX_BYTES", "524288"))
                    if len(body_text) > max_bytes:
                        f.write(body_text[:max_bytes] + "\n[truncated]\n")
                    else:
                        f.write(body_text)
        except OSError as e:
            LOGGER.debug("Could not write HTTP debug dump to %s: %s", path, e)


# ------------------------------ Raw client -----------------------------------


class QuotableClient:
    """
    Raw Quotable client. One method per endpoint:
      - /quotes
    """

    def __init__(
        self,
        session: requests.Session,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
    ):
        self._http = _QuotableHttp(base_url, session, timeout=timeout)
        LOGGER.info("QuotableClient initialized.")

    def get_quotes(self, *, page: int, limit: int) -> RawQuotePage:
        LOGGER.info("Fetching quotes page %d (limit=%d)", page, limit)
        data = self._http.get("/quotes", {"page": page, "limit": limit})
        try:
            resp = RawQuotePage.model_validate(data)
        except ValidationError as e:
            LOGGER.error("Quotes page %d failed validation: %s", page, e)
            raise QuotesDecodeError(
                "Quotes response validation failed", payload=data
            ) from e
        LOGGER.info("Quotes page %d returned %d records.", page, len(resp.results))
        return resp
