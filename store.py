"""
Travel Tracker - Snapshot store

Holds the latest fetched snapshot and the projections derived from it, and
decides when to refetch:

- refetch() runs one fetch-and-recompute cycle; a request made while a
  cycle is in flight is dropped, not queued.
- notify() coalesces bursts of change notifications into a single refetch
  once the debounce window has passed without a new signal.
- close() bumps the generation counter so an in-flight fetch started
  before it is never applied.
"""

import asyncio
import copy
from datetime import datetime
import logging

from analyze import analyze_travel
from models import Snapshot
from reconcile import reconcile_membership
from storage import StorageError
from streaks import CURRENT_STREAK_LOOKBACK_YEARS
from summaries import get_all_summaries, get_country_summary
from trips import get_grouped_trip_stats

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3


class TravelStore:

    def __init__(
        self,
        fetch_snapshot,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        lookback: int = CURRENT_STREAK_LOOKBACK_YEARS,
    ):
        """
        Args:
            fetch_snapshot: Async callable returning a fresh Snapshot
            debounce_seconds: Quiet period before notifications trigger a refetch
            lookback: Years the current streak walk may go back
        """
        self._fetch_snapshot = fetch_snapshot
        self.debounce_seconds = debounce_seconds
        self.lookback = lookback

        self.loading = True
        self.last_refreshed = None

        self._generation = 0
        self._in_flight = False
        self._closed = False
        self._debounce_handle = None
        self._tasks = set()

        self._apply(Snapshot.empty())

    # --- Refresh cycle ---

    async def refetch(self) -> bool:
        """Fetch and recompute. Returns True if a new snapshot was applied."""
        if self._closed:
            return False
        if self._in_flight:
            logger.debug("Refresh already in flight, dropping request")
            return False

        self._in_flight = True
        try:
            return await self._refresh(self._generation)
        finally:
            self._in_flight = False

    async def _refresh(self, generation: int) -> bool:
        applied = False
        try:
            snapshot = await self._fetch_snapshot()
        except StorageError as e:
            # Keep serving the previous snapshot
            logger.error(f"Error fetching travel data: {e}")
        except Exception as e:
            logger.error(f"Unexpected error fetching travel data: {e!r}")
        else:
            if generation != self._generation:
                logger.info("Store closed during fetch, discarding result")
                return False
            self._apply(snapshot)
            self.last_refreshed = datetime.now()
            applied = True

        if self.loading:
            self.loading = False
        return applied

    def _apply(self, snapshot: Snapshot):
        visited_by, visited_countries = reconcile_membership(snapshot)
        self.snapshot = snapshot
        self.visited_by = visited_by
        self.visited_countries = visited_countries
        self._summaries = get_all_summaries(snapshot)
        self._trip_stats = get_grouped_trip_stats(snapshot.visits)

    # --- Change notifications ---

    def notify(self, table: str = None):
        """Signal that a watched table changed. Must be called from the event loop."""
        if self._closed:
            return
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
        loop = asyncio.get_running_loop()
        self._debounce_handle = loop.call_later(self.debounce_seconds, self._debounce_elapsed)
        logger.debug(f"Change notification for {table or 'unknown table'}, refetch scheduled")

    def _debounce_elapsed(self):
        self._debounce_handle = None
        self._spawn(self.refetch())

    def start(self):
        """Schedule the initial load in the background."""
        self._spawn(self.refetch())

    def _spawn(self, coro):
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def close(self):
        """Stop reacting to notifications and drop any result still being fetched."""
        self._closed = True
        self._generation += 1
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # --- Projections ---
    # Callers get copies; the cached projections belong to the snapshot

    def get_country_summary(self, country_id: str) -> dict:
        summary = self._summaries.get(country_id)
        if summary is None:
            summary = get_country_summary(self.snapshot, country_id)
        return copy.deepcopy(summary)

    def get_all_summaries(self) -> dict:
        return copy.deepcopy(self._summaries)

    def get_grouped_trip_stats(self) -> dict:
        return copy.deepcopy(self._trip_stats)

    def travel_stats(self, today=None) -> dict:
        # Depends on today's date, so never cached
        return analyze_travel(self.snapshot, today=today, lookback=self.lookback)
