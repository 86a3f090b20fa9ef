"""Debounced search scheduling on the asyncio event loop."""
import asyncio
import logging
from typing import Callable, List, Optional

from models.search import SearchMatch
from services.search_engine import SearchEngine
from config import SEARCH_DEBOUNCE_MS

logger = logging.getLogger(__name__)

ResultsCallback = Callable[[str, List[SearchMatch]], None]


class DebouncedSearch:
    """
    Run a search only after the query has been idle for a quiet period.

    Each submit cancels the pending timer and bumps a generation counter.
    A scan that finishes after a newer submit belongs to a stale generation
    and its result is dropped, so a slow scan can never overwrite the
    results of a later query.
    """

    def __init__(
        self,
        search_engine: SearchEngine,
        on_results: ResultsCallback,
        delay_ms: int = SEARCH_DEBOUNCE_MS
    ):
        """
        Initialize DebouncedSearch.

        Args:
            search_engine: Engine used for the actual scan
            on_results: Called on the event loop with (query, matches) for every applied result
            delay_ms: Quiet period after the last submit, in milliseconds
        """
        self.search_engine = search_engine
        self.delay = delay_ms / 1000.0
        self._on_results = on_results
        self._generation = 0
        self._timer: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> bool:
        """True while a scan is scheduled or running."""
        return self._timer is not None or (self._task is not None and not self._task.done())

    def submit(self, content: Optional[str], query: Optional[str]) -> bool:
        """
        Schedule a scan for query, superseding any earlier request.

        Must be called from a running event loop. An empty query or empty
        content publishes an empty result immediately without scheduling.

        Returns:
            True if a scan was scheduled
        """
        self._generation += 1
        generation = self._generation
        self._cancel_timer()

        if not query or not content:
            self._on_results(query or "", [])
            return False

        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay, self._start_scan, loop, generation, content, query)
        logger.debug(f"Scheduled search generation {generation} in {self.delay:.3f}s")
        return True

    def cancel(self) -> None:
        """Drop any scheduled scan and invalidate one already running."""
        self._generation += 1
        self._cancel_timer()

    async def drain(self) -> None:
        """Wait until the scheduled and running scans have finished."""
        while self._timer is not None:
            await asyncio.sleep(max(self.delay / 2, 0.001))
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _start_scan(
        self,
        loop: asyncio.AbstractEventLoop,
        generation: int,
        content: str,
        query: str
    ) -> None:
        self._timer = None
        if generation != self._generation:
            return
        self._task = loop.create_task(self._scan(generation, content, query))

    async def _scan(self, generation: int, content: str, query: str) -> None:
        loop = asyncio.get_running_loop()
        try:
            matches = await loop.run_in_executor(None, self.search_engine.search, content, query)
        except Exception as e:
            logger.error(f"Search for '{query[:50]}' failed: {e}", exc_info=True)
            return

        if generation != self._generation:
            logger.debug(f"Discarding stale search generation {generation} (current {self._generation})")
            return

        self._on_results(query, matches)
