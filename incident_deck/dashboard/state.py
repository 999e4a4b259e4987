# ---
# File: incident_deck/dashboard/state.py
# Purpose: Dashboard list state and the pure transitions applied to it by user actions.
#          Every filter, search, sort or page-size change returns to page 1.
# ---

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Union

from incident_deck import config
from incident_deck.dashboard.cursor_stack import CursorStack
from incident_deck.dashboard.sorting import next_sort
from incident_deck.incidents.models import (
    DEFAULT_SORT_FIELD,
    DEFAULT_SORT_ORDER,
    Incident,
    IncidentCounts,
    IncidentListResponse,
    IncidentSeverity,
    IncidentStatus,
    ListQuery,
    SortField,
    SortOrder,
)

FILTER_FIELDS = ("status", "severity", "service", "search")


@dataclass(frozen=True)
class DashboardFilters:
    status: Optional[IncidentStatus] = None
    severity: Optional[IncidentSeverity] = None
    service: Optional[str] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class DashboardState:
    filters: DashboardFilters = field(default_factory=DashboardFilters)
    order_by: SortField = DEFAULT_SORT_FIELD
    order: SortOrder = DEFAULT_SORT_ORDER
    page_size: int = config.DEFAULT_PAGE_SIZE
    page_size_options: Tuple[int, ...] = config.PAGE_SIZE_OPTIONS
    cursors: CursorStack = field(default_factory=CursorStack)

    # Last successful listing / counts
    rows: Tuple[Incident, ...] = ()
    next_cursor: Optional[str] = None
    total_count: int = 0
    total_pages: int = 1
    open_count: int = 0
    active_sev1_count: int = 0

    loading: bool = False
    error: Optional[str] = None

    @property
    def page_number(self) -> int:
        return self.cursors.page_number

    @property
    def has_next(self) -> bool:
        return self.next_cursor is not None

    @property
    def has_previous(self) -> bool:
        return self.cursors.has_previous


def _normalize_filter(name: str, value):
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if name == "status":
        return IncidentStatus(value)
    if name == "severity":
        return IncidentSeverity(value)
    return value.strip() if name == "search" else value


# ---
# Change one filter dimension ("" or None clears it) and go back to the first page.
# Raises ValueError for unknown dimensions or values outside the enumerations.
# ---
def apply_filter_change(state: DashboardState, name: str, value) -> DashboardState:
    if name not in FILTER_FIELDS:
        raise ValueError(f"unknown filter '{name}'")
    filters = replace(state.filters, **{name: _normalize_filter(name, value)})
    return replace(state, filters=filters, cursors=state.cursors.reset(), next_cursor=None)


def apply_page_size_change(state: DashboardState, page_size: int) -> DashboardState:
    page_size = int(page_size)
    if page_size not in state.page_size_options:
        raise ValueError(f"page size must be one of {', '.join(str(size) for size in state.page_size_options)}")
    return replace(state, page_size=page_size, cursors=state.cursors.reset(), next_cursor=None)


def apply_sort_click(state: DashboardState, column: Union[SortField, str]) -> DashboardState:
    order_by, order = next_sort(state.order_by, state.order, column)
    return replace(state, order_by=order_by, order=order, cursors=state.cursors.reset(), next_cursor=None)


def apply_sort(state: DashboardState, order_by: Union[SortField, str], order: Union[SortOrder, str]) -> DashboardState:
    """Set an explicit sort (no tri-state cycling) and go back to the first page."""
    return replace(
        state,
        order_by=SortField(order_by),
        order=SortOrder(order),
        cursors=state.cursors.reset(),
        next_cursor=None,
    )


# ---
# Page navigation. Both are no-ops when there is nowhere to go.
# next_cursor is cleared until the new page arrives so a second click cannot
# push the same cursor twice.
# ---
def advance_page(state: DashboardState) -> DashboardState:
    if not state.has_next:
        return state
    return replace(state, cursors=state.cursors.advance(state.next_cursor), next_cursor=None)


def retreat_page(state: DashboardState) -> DashboardState:
    if not state.has_previous:
        return state
    return replace(state, cursors=state.cursors.retreat(), next_cursor=None)


def build_list_query(state: DashboardState) -> ListQuery:
    return ListQuery.model_validate(
        {
            "limit": state.page_size,
            "status": state.filters.status,
            "severity": state.filters.severity,
            "service": state.filters.service,
            "search": state.filters.search,
            "sort": state.order_by,
            "order": state.order,
            "cursor": state.cursors.current,
        },
        context={"page_size_options": state.page_size_options},
    )


# ---
# Listing totals win over the counts endpoint total; a response without
# totals keeps the previous values.
# ---
def apply_list_response(state: DashboardState, response: IncidentListResponse) -> DashboardState:
    meta = response.meta
    return replace(
        state,
        rows=tuple(response.data),
        next_cursor=meta.nextCursor,
        total_count=meta.totalCount if meta.totalCount is not None else state.total_count,
        total_pages=meta.totalPages if meta.totalPages is not None else state.total_pages,
        error=None,
    )


def apply_counts(state: DashboardState, counts: IncidentCounts, include_total: bool = False) -> DashboardState:
    changes = {"open_count": counts.openCount, "active_sev1_count": counts.activeSev1Count}
    if include_total:
        changes["total_count"] = counts.totalCount
    return replace(state, **changes)


def apply_error(state: DashboardState, message: str) -> DashboardState:
    return replace(state, error=message)


def apply_loading(state: DashboardState, loading: bool) -> DashboardState:
    return replace(state, loading=loading)
