# ---
# File: incident_deck/dashboard/controller.py
# Purpose: Dashboard session: owns the list state, runs fetches through the query executor
#          and exposes the user actions (filters, search, sort, paging, refresh).
# ---

import asyncio
import logging
from typing import Optional, Tuple

from incident_deck import config
from incident_deck.client.errors import IncidentApiError
from incident_deck.dashboard.debounce import Debouncer
from incident_deck.dashboard.executor import QueryExecutor
from incident_deck.dashboard.state import (
    DashboardState,
    advance_page,
    apply_counts,
    apply_error,
    apply_filter_change,
    apply_loading,
    apply_page_size_change,
    apply_sort_click,
    build_list_query,
    retreat_page,
)
from incident_deck.incidents.incident_services import IncidentService
from incident_deck.incidents.models import IncidentFilterOptions

logger = logging.getLogger(__name__)

INITIAL_LOAD_FAILED_MESSAGE = "Failed to fetch initial data"


class DashboardController:
    """
    Incident Dashboard Controller

    Single-threaded owner of the dashboard state. Each action applies a pure
    transition to the state and, when the query changed, triggers one fetch.

    Reset Policy:
        - status / severity / service filter, page size and sort changes reset
          pagination and fetch immediately
        - search text is debounced; only the settled value resets and fetches

    Ordering:
        Fetches may overlap. The executor's generation counter guarantees that
        only the most recently issued fetch updates the visible rows.
    """

    def __init__(
        self,
        service: IncidentService,
        page_size_options: Tuple[int, ...] = config.PAGE_SIZE_OPTIONS,
        page_size: int = config.DEFAULT_PAGE_SIZE,
        debounce_ms: int = config.SEARCH_DEBOUNCE_MS,
    ):
        if page_size not in page_size_options:
            raise ValueError(f"default page size {page_size} is not one of {page_size_options}")
        self.service = service
        self.executor = QueryExecutor(service)
        self.state = DashboardState(page_size=page_size, page_size_options=tuple(page_size_options))
        self.filter_options = IncidentFilterOptions()
        self.stats_loading = False
        self.search_text = ""
        self._debouncer = Debouncer(debounce_ms / 1000, self._apply_search)

    # ---
    # Mount: load filter options and unfiltered counts side by side, then the first page.
    # Failures are logged and surfaced on the state, never raised. A failed options/counts
    # load stays reported even when the first listing succeeds.
    # ---
    async def load_initial(self) -> DashboardState:
        self.stats_loading = True
        initial_error = None
        try:
            filters, counts = await asyncio.gather(
                self.service.get_filters(),
                self.service.get_counts(),
            )
            self.filter_options = filters
            self.state = apply_counts(self.state, counts, include_total=True)
        except IncidentApiError as exc:
            logger.error("[DASHBOARD] Failed to fetch initial data: %s", exc.message)
            initial_error = INITIAL_LOAD_FAILED_MESSAGE
            self.state = apply_error(self.state, initial_error)
        finally:
            self.stats_loading = False

        state = await self.fetch()
        if initial_error and state.error is None:
            self.state = state = apply_error(state, initial_error)
        return state

    async def fetch(self) -> DashboardState:
        """Issue one listing + counts fetch for the current parameters."""
        generation = self.executor.issue()
        query = build_list_query(self.state)
        self.state = apply_loading(self.state, True)
        logger.debug("[DASHBOARD] Fetch gen %d: %s", generation, query.to_params())

        try:
            result = await self.executor.run(query, generation)
        except Exception:
            if self.executor.is_current(generation):
                self.state = apply_loading(self.state, False)
            raise
        self.state = self.executor.apply(self.state, result)
        return self.state

    async def refresh(self) -> DashboardState:
        return await self.fetch()

    async def set_status_filter(self, value: Optional[str]) -> DashboardState:
        self.state = apply_filter_change(self.state, "status", value)
        return await self.fetch()

    async def set_severity_filter(self, value: Optional[str]) -> DashboardState:
        self.state = apply_filter_change(self.state, "severity", value)
        return await self.fetch()

    async def set_service_filter(self, value: Optional[str]) -> DashboardState:
        self.state = apply_filter_change(self.state, "service", value)
        return await self.fetch()

    async def set_page_size(self, page_size: int) -> DashboardState:
        self.state = apply_page_size_change(self.state, page_size)
        return await self.fetch()

    async def click_sort(self, column: str) -> DashboardState:
        self.state = apply_sort_click(self.state, column)
        return await self.fetch()

    # ---
    # Keystroke handler. Nothing happens until the input has been idle for the
    # debounce delay; then the settled text is applied as a filter change.
    # ---
    def set_search_text(self, text: str) -> None:
        self.search_text = text
        self._debouncer.trigger(text)

    async def submit_search(self, text: str) -> DashboardState:
        """Apply search text immediately, skipping the debounce."""
        self._debouncer.cancel()
        self.search_text = text
        return await self._apply_search(text)

    async def _apply_search(self, text: str) -> DashboardState:
        normalized = text.strip() or None
        if normalized == self.state.filters.search:
            return self.state
        self.state = apply_filter_change(self.state, "search", text)
        return await self.fetch()

    @property
    def search_pending(self) -> bool:
        return self._debouncer.pending

    async def wait_for_search(self) -> None:
        await self._debouncer.drain()

    async def next_page(self) -> DashboardState:
        if not self.state.has_next:
            return self.state
        self.state = advance_page(self.state)
        return await self.fetch()

    async def previous_page(self) -> DashboardState:
        if not self.state.has_previous:
            return self.state
        self.state = retreat_page(self.state)
        return await self.fetch()

    def close(self) -> None:
        """Drop a pending search and cancel search fetches already running."""
        self._debouncer.close()

    async def aclose(self) -> None:
        await self._debouncer.aclose()
