"""
Paging/transport configuration for the Quotes service.

Centralizes tunables so callers can adjust defaults without touching core
logic. ``from_env`` layers QUOTABLE_* environment variables over the defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "https://api.quotable.io/"


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return int(raw)


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return float(raw)


@dataclass(frozen=True)
class PagingConfig:
    # Items requested per page (the server's `limit` query parameter)
    page_size: int = 10

    # How close (in items) to either end of the aggregated sequence a scroll
    # position must be before the neighbouring page is requested. None means
    # one page worth of items.
    prefetch_distance: Optional[int] = None

    # Concurrent page loads per cache
    max_workers: int = 2

    # Transport
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 15.0

    user_agent: str = "pyquotable"

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.prefetch_distance is not None and self.prefetch_distance < 0:
            raise ValueError(
                f"prefetch_distance must be >= 0, got {self.prefetch_distance}"
            )

    @property
    def effective_prefetch_distance(self) -> int:
        if self.prefetch_distance is None:
            return self.page_size
        return self.prefetch_distance

    @classmethod
    def from_env(cls, **overrides) -> "PagingConfig":
        """Build a config from QUOTABLE_* variables; keyword overrides win."""
        values = {}
        base_url = os.getenv("QUOTABLE_BASE_URL")
        if base_url:
            values["base_url"] = base_url
        page_size = _env_int("QUOTABLE_PAGE_SIZE")
        if page_size is not None:
            values["page_size"] = page_size
        timeout = _env_float("QUOTABLE_TIMEOUT")
        if timeout is not None:
            values["timeout"] = timeout
        max_workers = _env_int("QUOTABLE_MAX_WORKERS")
        if max_workers is not None:
            values["max_workers"] = max_workers
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
