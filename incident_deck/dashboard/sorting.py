# ---
# File: incident_deck/dashboard/sorting.py
# Purpose: Column-header sort cycling for the incident table
# ---

from typing import Tuple, Union

from incident_deck.incidents.models import (
    DEFAULT_SORT_FIELD,
    DEFAULT_SORT_ORDER,
    SortField,
    SortOrder,
)


# ---
# Next (orderBy, order) after clicking a column header.
#   - another column          -> (column, asc)
#   - active column, asc      -> (column, desc)
#   - active column, desc     -> default sort (createdAt, desc), never back to asc
# Raises ValueError for columns outside the sortable allow-list.
# ---
def next_sort(
    order_by: SortField,
    order: SortOrder,
    clicked: Union[SortField, str],
) -> Tuple[SortField, SortOrder]:
    column = SortField(clicked)
    if column != order_by:
        return column, SortOrder.ASC
    if order == SortOrder.ASC:
        return column, SortOrder.DESC
    return DEFAULT_SORT_FIELD, DEFAULT_SORT_ORDER
