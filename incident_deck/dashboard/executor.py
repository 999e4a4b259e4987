# ---
# File: incident_deck/dashboard/executor.py
# Purpose: Runs the listing + counts request pair for a dashboard state and folds the
#          results back into the latest state, discarding superseded responses.
# ---

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from incident_deck.client.errors import IncidentApiError
from incident_deck.dashboard.state import (
    DashboardState,
    apply_counts,
    apply_error,
    apply_list_response,
    apply_loading,
)
from incident_deck.incidents.incident_services import IncidentService
from incident_deck.incidents.models import IncidentCounts, IncidentListResponse, ListQuery

logger = logging.getLogger(__name__)

LIST_FAILED_MESSAGE = "Failed to fetch incidents"
COUNTS_FAILED_MESSAGE = "Failed to fetch incident counts"


@dataclass
class FetchResult:
    generation: int
    listing: Optional[IncidentListResponse] = None
    counts: Optional[IncidentCounts] = None
    listing_error: Optional[str] = None
    counts_error: Optional[str] = None


# ---
# Query executor with request-generation tagging.
# issue() hands out a new, strictly increasing generation per trigger; apply()
# only lets the result of the latest issued generation touch the state.
# In-flight requests are never cancelled, their results are dropped.
# ---
class QueryExecutor:

    def __init__(self, service: IncidentService):
        self.service = service
        self.generation = 0

    def issue(self) -> int:
        self.generation += 1
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    async def run(self, query: ListQuery, generation: int) -> FetchResult:
        """
        Fetch one page and the filtered counts concurrently.
        The counts request carries filters only. Failures are captured on the
        result rather than raised so the caller can keep its previous rows.
        """
        listing, counts = await asyncio.gather(
            self.service.get_incidents(query),
            self.service.get_counts(query.counts_query()),
            return_exceptions=True,
        )
        result = FetchResult(generation=generation)

        if isinstance(listing, IncidentApiError):
            logger.error("[DASHBOARD] Failed to fetch incidents (gen %d): %s", generation, listing.message)
            result.listing_error = listing.message or LIST_FAILED_MESSAGE
        elif isinstance(listing, BaseException):
            raise listing
        else:
            result.listing = listing

        if isinstance(counts, IncidentApiError):
            logger.error("[DASHBOARD] Failed to fetch stats (gen %d): %s", generation, counts.message)
            result.counts_error = counts.message or COUNTS_FAILED_MESSAGE
        elif isinstance(counts, BaseException):
            raise counts
        else:
            result.counts = counts

        return result

    def apply(self, state: DashboardState, result: FetchResult) -> DashboardState:
        if not self.is_current(result.generation):
            logger.info(
                "[DASHBOARD] Discarding stale response (gen %d, latest %d)",
                result.generation,
                self.generation,
            )
            return state

        if result.listing is not None:
            state = apply_list_response(state, result.listing)
        if result.counts is not None:
            state = apply_counts(state, result.counts)

        error = result.listing_error or result.counts_error
        if error:
            state = apply_error(state, error)
        return apply_loading(state, False)
