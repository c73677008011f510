"""Grant query module for Grant Audit."""

from .filters import (
    ASCENDING,
    DESCENDING,
    SORT_KEYS,
    GrantFilter,
    matches,
    apply_filters,
    sort_grants,
    search_flagged,
    toggle_selection,
)

__all__ = [
    "ASCENDING",
    "DESCENDING",
    "SORT_KEYS",
    "GrantFilter",
    "matches",
    "apply_filters",
    "sort_grants",
    "search_flagged",
    "toggle_selection",
]
