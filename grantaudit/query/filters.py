"""
Filtering, searching and sorting over grant records.

All functions return new lists and never raise on malformed filter input:
an inverted amount range gives an empty result, an unknown sort key or
direction leaves the input order unchanged.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from grantaudit.data import ALL_MINISTRIES, Grant
from grantaudit.normalization import ALL_YEARS, is_operational_name

ASCENDING = "asc"
DESCENDING = "desc"

SORT_KEYS = {
    "amount": lambda g: g.amount,
    "fiscal_year": lambda g: g.fiscal_year,
    "ministry": lambda g: g.ministry,
    "program": lambda g: g.program,
    "recipient": lambda g: g.recipient,
}

# Column names used by the API and the export header
SORT_KEY_ALIASES = {
    "fiscalYear": "fiscal_year",
    "fiscal-year": "fiscal_year",
}


@dataclass
class GrantFilter:
    """Active filters for the grant explorer. Defaults match everything."""
    ministry: str = ALL_MINISTRIES
    fiscal_year: str = ALL_YEARS
    search_text: str = ""
    min_amount: Optional[float] = 0.0
    max_amount: Optional[float] = None
    exclude_operational: bool = False

    @property
    def amount_bounds(self) -> tuple[float, float]:
        low = self.min_amount if self.min_amount is not None else -math.inf
        high = self.max_amount if self.max_amount is not None else math.inf
        return low, high


def matches(grant: Grant, filters: GrantFilter) -> bool:
    """Check a grant against every active filter."""
    if filters.ministry != ALL_MINISTRIES and grant.ministry != filters.ministry:
        return False

    if filters.fiscal_year != ALL_YEARS and grant.fiscal_year != filters.fiscal_year:
        return False

    if filters.search_text:
        query = filters.search_text.casefold()
        if query not in grant.program.casefold() and query not in grant.recipient.casefold():
            return False

    low, high = filters.amount_bounds
    if not (low <= grant.amount <= high):
        return False

    if filters.exclude_operational and is_operational_name(grant.recipient):
        return False

    return True


def apply_filters(grants: Iterable[Grant], filters: Optional[GrantFilter] = None, **kwargs) -> list[Grant]:
    """
    Grants matching all active filters, in input order.

    Filters may be given as a GrantFilter or as keyword arguments
    (ministry, fiscal_year, search_text, min_amount, max_amount,
    exclude_operational).
    """
    if filters is None:
        filters = GrantFilter(**kwargs)

    try:
        low, high = filters.amount_bounds
        if low > high:
            return []
        return [g for g in grants if matches(g, filters)]
    except (TypeError, AttributeError):
        # Non-numeric bounds or search text
        return []


def sort_grants(grants: Iterable[Grant], key: str = "amount", direction: str = DESCENDING) -> list[Grant]:
    """
    Stable sort by one column.

    Equal keys keep their input order in both directions.
    """
    grants = list(grants)
    key = SORT_KEY_ALIASES.get(key, key)

    key_func = SORT_KEYS.get(key)
    if key_func is None or direction not in (ASCENDING, DESCENDING):
        return grants

    return sorted(grants, key=key_func, reverse=(direction == DESCENDING))


def search_flagged(grants: Iterable[Grant], query: str = "") -> list[Grant]:
    """
    Flagged grants matching a search across ministry, program, recipient
    and flag reason.
    """
    flagged = [g for g in grants if g.flagged]
    if not query:
        return flagged

    query = query.casefold()
    return [
        g for g in flagged
        if query in g.ministry.casefold()
        or query in g.program.casefold()
        or query in g.recipient.casefold()
        or (g.flag_reason is not None and query in g.flag_reason.casefold())
    ]


def toggle_selection(selected: list[str], value: str, all_value: str) -> list[str]:
    """
    Update a multi-select filter.

    Choosing the "ALL ..." value clears everything else; choosing a
    specific value drops "ALL ..." and toggles that value; an empty
    selection falls back to `all_value`.
    """
    if value == all_value:
        return [all_value]

    if value in selected:
        values = [v for v in selected if v != value]
    else:
        values = [v for v in selected if v != all_value] + [value]

    return values or [all_value]
