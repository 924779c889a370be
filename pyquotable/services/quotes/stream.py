"""
In-memory page cache that turns successive page loads into one live stream.

QuotesPageCache publishes a contiguous run of loaded pages and exposes the
concatenation of their items in ascending cursor order. Each attached
Subscription first receives the current aggregated state, then every later
update, until it is detached or the cache is closed.

Usage:
    with QuotesPageCache(QuotesPagingSource(client), page_size=10) as cache:
        sub = cache.attach()
        cache.load_next().result()
        for event in sub.drain():
            ...
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .models.dto import QuoteItem
from .paging import (
    FIRST_CURSOR,
    LoadError,
    LoadRequest,
    LoadResult,
    Page,
    QuotesPagingSource,
)

LOGGER = logging.getLogger(__name__)


# ------------------------------- Events --------------------------------------


@dataclass(frozen=True)
class PageSnapshot:
    """Aggregated state of the cache at one point in time."""

    items: Tuple[QuoteItem, ...]
    loaded_cursors: Tuple[int, ...]
    prev_cursor: Optional[int]
    next_cursor: Optional[int]

    @property
    def end_reached(self) -> bool:
        return bool(self.loaded_cursors) and self.next_cursor is None


@dataclass(frozen=True)
class LoadFailed:
    """A single load failed; earlier items are untouched and it may be retried."""

    cursor: int
    cause: BaseException


StreamEvent = Union[PageSnapshot, LoadFailed]

_CLOSED = object()


# ----------------------------- Subscription ----------------------------------


class Subscription:
    """Ordered, per-consumer view of a QuotesPageCache's events."""

    def __init__(self, cache: "QuotesPageCache"):
        self._cache = cache
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._finished = False

    def _deliver(self, event: StreamEvent) -> None:
        self._queue.put(event)

    def _finish(self) -> None:
        self._queue.put(_CLOSED)

    @property
    def closed(self) -> bool:
        return self._finished

    def get(self, timeout: Optional[float] = None) -> Optional[StreamEvent]:
        """Block for the next event; None once the subscription has ended.

        Raises queue.Empty if ``timeout`` elapses first.
        """
        if self._finished and self._queue.empty():
            return None
        event = self._queue.get(timeout=timeout)
        if event is _CLOSED:
            self._finished = True
            return None
        return event  # type: ignore[return-value]

    def drain(self) -> List[StreamEvent]:
        """Return every event already delivered, without blocking."""
        events: List[StreamEvent] = []
        while True:
            try:
                event = self._queue.get_nowait()
            except queue.Empty:
                return events
            if event is _CLOSED:
                self._finished = True
                return events
            events.append(event)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[StreamEvent]:
        while True:
            event = self.get()
            if event is None:
                return
            yield event

    def close(self) -> None:
        self._cache.detach(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


# ------------------------------ Page cache -----------------------------------


class QuotesPageCache:
    """
    Scope-bound cache of loaded pages with multicast delivery.

    Loads run on an executor. Only a contiguous run of cursors is published;
    a page that finishes ahead of a gap is buffered until the gap is filled,
    so subscribers see pages in cursor order, never in completion order. A
    failed load emits LoadFailed, keeps any buffered later pages, and leaves
    the cursor free to be requested again.
    """

    def __init__(
        self,
        engine: QuotesPagingSource,
        page_size: int = 10,
        *,
        prefetch_distance: Optional[int] = None,
        executor: Optional[Executor] = None,
        max_workers: int = 2,
    ):
        # Validates page_size the same way every load will
        LoadRequest(cursor=None, page_size=page_size)
        self._engine = engine
        self._page_size = page_size
        self._prefetch_distance = (
            page_size if prefetch_distance is None else prefetch_distance
        )
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="quotes-pager"
        )
        self._lock = threading.Lock()
        # Published pages, always a contiguous run of cursors
        self._pages: Dict[int, Page] = {}
        # Finished pages waiting for the gap next to the published run
        self._buffered: Dict[int, Page] = {}
        # Cursor the published run starts from while it is empty
        self._anchor: Optional[int] = None
        self._in_flight: Dict[int, Optional[Future]] = {}
        self._subscribers: List[Subscription] = []
        # Bumped on refresh/close; loads started under an older value are dropped.
        self._generation = 0
        self._closed = False
        LOGGER.debug(
            "QuotesPageCache created: page_size=%d prefetch_distance=%d",
            page_size,
            self._prefetch_distance,
        )

    # ----- Subscriptions -----

    def attach(self) -> Subscription:
        sub = Subscription(self)
        with self._lock:
            self._ensure_open()
            sub._deliver(self._snapshot_locked())
            self._subscribers.append(sub)
            LOGGER.debug("Attached subscriber (%d total)", len(self._subscribers))
        return sub

    def detach(self, sub: Subscription) -> None:
        with self._lock:
            if sub not in self._subscribers:
                return
            self._subscribers.remove(sub)
            LOGGER.debug("Detached subscriber (%d left)", len(self._subscribers))
        sub._finish()

    # ----- State -----

    def snapshot(self) -> PageSnapshot:
        with self._lock:
            return self._snapshot_locked()

    @property
    def items(self) -> Tuple[QuoteItem, ...]:
        return self.snapshot().items

    @property
    def closed(self) -> bool:
        return self._closed

    def in_flight(self) -> Tuple[int, ...]:
        with self._lock:
            return tuple(sorted(self._in_flight))

    def buffered(self) -> Tuple[int, ...]:
        """Cursors loaded but held back until the gap before them is filled."""
        with self._lock:
            return tuple(sorted(self._buffered))

    # ----- Loading -----

    def load(self, cursor: Optional[int] = None) -> Optional["Future[LoadResult]"]:
        """Schedule a load of ``cursor`` unless it is loaded or already in flight."""
        request = LoadRequest(cursor=cursor, page_size=self._page_size)
        page = request.page
        with self._lock:
            self._ensure_open()
            if (
                page in self._pages
                or page in self._buffered
                or page in self._in_flight
            ):
                LOGGER.debug("Page %d already loaded or in flight, skipping", page)
                return None
            if self._anchor is None:
                self._anchor = page
            generation = self._generation
            self._in_flight[page] = None
        # Submitted outside the lock so an inline executor can merge directly.
        future = self._executor.submit(self._run_load, request, generation)
        with self._lock:
            if generation != self._generation:
                future.cancel()
            elif page in self._in_flight:
                self._in_flight[page] = future
        return future

    def load_next(self) -> Optional["Future[LoadResult]"]:
        with self._lock:
            if not self._pages:
                cursor = self._anchor or FIRST_CURSOR
            else:
                cursor = self._pages[max(self._pages)].next_cursor
        if cursor is None:
            LOGGER.debug("End of data reached, no forward load")
            return None
        return self.load(cursor)

    def load_prev(self) -> Optional["Future[LoadResult]"]:
        with self._lock:
            if not self._pages:
                return None
            cursor = self._pages[min(self._pages)].prev_cursor
        if cursor is None:
            return None
        return self.load(cursor)

    def on_scroll(self, position: int) -> List["Future[LoadResult]"]:
        """Scroll-proximity trigger: load neighbours when ``position`` nears an edge."""
        with self._lock:
            size = sum(len(p.items) for p in self._pages.values())
        futures = []
        if position >= size - self._prefetch_distance:
            fut = self.load_next()
            if fut is not None:
                futures.append(fut)
        if position < self._prefetch_distance:
            fut = self.load_prev()
            if fut is not None:
                futures.append(fut)
        return futures

    def refresh(self, position: Optional[int] = None) -> Optional["Future[LoadResult]"]:
        """Drop every loaded page and reload from the engine's refresh anchor."""
        anchor = self._engine.refresh_anchor(position)
        cursor = anchor if anchor is not None and anchor >= FIRST_CURSOR else None
        with self._lock:
            self._ensure_open()
            self._generation += 1
            for fut in self._in_flight.values():
                if fut is not None:
                    fut.cancel()
            self._in_flight.clear()
            self._pages.clear()
            self._buffered.clear()
            self._anchor = cursor or FIRST_CURSOR
            LOGGER.info("Refreshing from cursor %s", cursor or FIRST_CURSOR)
            self._publish_locked(self._snapshot_locked())
        return self.load(cursor)

    def _run_load(self, request: LoadRequest, generation: int) -> LoadResult:
        result = self._engine.load(request)
        self._merge(request.page, generation, result)
        return result

    def _merge(self, page: int, generation: int, result: LoadResult) -> None:
        with self._lock:
            if self._closed or generation != self._generation:
                LOGGER.debug("Discarding stale result for page %d", page)
                return
            self._in_flight.pop(page, None)
            if isinstance(result, LoadError):
                LOGGER.warning("Page %d failed: %s", page, result.cause)
                self._publish_locked(LoadFailed(cursor=page, cause=result.cause))
                return
            self._buffered[page] = result
            merged = self._flush_locked()
            if not merged:
                LOGGER.debug("Holding page %d until the gap before it fills", page)
                return
            LOGGER.info(
                "Merged pages %s (%d pages cached, %d held)",
                merged,
                len(self._pages),
                len(self._buffered),
            )
            self._publish_locked(self._snapshot_locked())

    # ----- Internals -----

    def _flush_locked(self) -> List[int]:
        """Move buffered pages adjacent to the published run into it."""
        merged: List[int] = []
        while True:
            if not self._pages:
                cursor = self._anchor if self._anchor in self._buffered else None
            else:
                lo, hi = min(self._pages), max(self._pages)
                if hi + 1 in self._buffered and self._pages[hi].next_cursor:
                    cursor = hi + 1
                elif lo - 1 in self._buffered:
                    cursor = lo - 1
                else:
                    cursor = None
            if cursor is None:
                return merged
            self._pages[cursor] = self._buffered.pop(cursor)
            merged.append(cursor)

    def _snapshot_locked(self) -> PageSnapshot:
        cursors = sorted(self._pages)
        items = tuple(item for c in cursors for item in self._pages[c].items)
        if not cursors:
            return PageSnapshot(
                items=(), loaded_cursors=(), prev_cursor=None, next_cursor=None
            )
        return PageSnapshot(
            items=items,
            loaded_cursors=tuple(cursors),
            prev_cursor=self._pages[cursors[0]].prev_cursor,
            next_cursor=self._pages[cursors[-1]].next_cursor,
        )

    def _publish_locked(self, event: StreamEvent) -> None:
        for sub in self._subscribers:
            sub._deliver(event)

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("QuotesPageCache is closed")

    # ----- Lifetime -----

    def close(self) -> None:
        """End the scope: cancel pending loads, drop pages, end subscriptions."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._generation += 1
            pending = [f for f in self._in_flight.values() if f is not None]
            self._in_flight.clear()
            self._pages.clear()
            self._buffered.clear()
            subscribers = list(self._subscribers)
            self._subscribers.clear()
        for fut in pending:
            fut.cancel()
        for sub in subscribers:
            sub._finish()
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
        LOGGER.debug(
            "QuotesPageCache closed (%d pending loads cancelled)", len(pending)
        )

    def __enter__(self) -> "QuotesPageCache":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
