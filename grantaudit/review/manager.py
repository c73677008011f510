"""Review list and grant flag management."""

from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Optional

from grantaudit.data.models import Grant, ReviewItem, ReviewItemType
from grantaudit.normalization import slugify


class ReviewTracker:
    """
    Single store for everything a user has put under review.

    Holds two kinds of entries: review items (programs and recipients on the
    watch list) and grant flags (individual disbursements marked for review,
    with an optional reason). Grant records themselves are never mutated;
    the `flagged`/`flag_reason` fields callers see come from `project()`.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock
        self._items: dict[str, ReviewItem] = {}
        self._grant_flags: dict[str, Optional[str]] = {}

    # -- review items -------------------------------------------------------

    def add_to_review(self, item: ReviewItem) -> bool:
        """
        Put a program or recipient on the review list.

        Returns True if added, False if an item with the same id was
        already present (the existing entry is left untouched).
        """
        if item.id in self._items:
            return False

        self._items[item.id] = replace(
            item,
            flag_reason=list(item.flag_reason),
            date_added=self._clock(),
        )
        return True

    def remove_from_review(self, item_id: str) -> bool:
        """Remove an item from the review list. Returns False if it was not there."""
        return self._items.pop(item_id, None) is not None

    def get(self, item_id: str) -> Optional[ReviewItem]:
        return self._items.get(item_id)

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> list[ReviewItem]:
        """Review items in insertion order."""
        return list(self._items.values())

    def unique_reasons(self) -> list[str]:
        """Distinct flag reasons across the review list, first-seen order."""
        seen = {}
        for item in self._items.values():
            for reason in item.flag_reason:
                seen.setdefault(reason, None)
        return list(seen)

    def filter_items(
        self,
        search: str = "",
        item_type: str = "all",
        reason: str = "all",
    ) -> list[ReviewItem]:
        """
        Filter the review list.

        Args:
            search: Case-insensitive substring of the item name or ministry.
            item_type: "all", "program" or "recipient".
            reason: "all", or a case-insensitive substring of any flag reason.
        """
        query = search.lower()
        reason_query = reason.lower()

        results = []
        for item in self._items.values():
            matches_search = query in item.name.lower() or (
                item.ministry is not None and query in item.ministry.lower()
            )
            matches_type = item_type == "all" or item.type.value == item_type
            matches_reason = reason == "all" or any(
                reason_query in r.lower() for r in item.flag_reason
            )
            if matches_search and matches_type and matches_reason:
                results.append(item)
        return results

    # -- grant flags --------------------------------------------------------

    def toggle_grant_flag(self, grant_id: str, flagged: bool, reason: Optional[str] = None) -> None:
        """Flag or unflag a grant. Unflagging drops any stored reason."""
        if flagged:
            self._grant_flags[grant_id] = reason or None
        else:
            self._grant_flags.pop(grant_id, None)

    def clear_grant_flags(self, grant_ids: Iterable[str]) -> int:
        """Unflag several grants at once. Returns how many were flagged."""
        cleared = 0
        for grant_id in grant_ids:
            if grant_id in self._grant_flags:
                del self._grant_flags[grant_id]
                cleared += 1
        return cleared

    def is_grant_flagged(self, grant_id: str) -> bool:
        return grant_id in self._grant_flags

    def grant_flag_reason(self, grant_id: str) -> Optional[str]:
        return self._grant_flags.get(grant_id)

    @property
    def flagged_grant_ids(self) -> list[str]:
        return list(self._grant_flags)

    def seed_grant_flags(self, grants: Iterable[Grant]) -> None:
        """Take over the flag state carried by freshly loaded records."""
        for grant in grants:
            if grant.flagged:
                self._grant_flags[grant.id] = grant.flag_reason

    def project(self, grant: Grant) -> Grant:
        """Return the grant with its flag fields taken from this tracker."""
        flagged = grant.id in self._grant_flags
        reason = self._grant_flags.get(grant.id) if flagged else None
        if grant.flagged == flagged and grant.flag_reason == reason:
            return grant
        return replace(grant, flagged=flagged, flag_reason=reason)

    def project_all(self, grants: Iterable[Grant]) -> list[Grant]:
        return [self.project(g) for g in grants]


def review_item_for_program(
    ministry: str,
    program: str,
    total_amount: float,
    reasons: Iterable[str],
) -> ReviewItem:
    """Build a review item for a (ministry, program) pair."""
    return ReviewItem(
        id=slugify(ministry, program),
        name=program,
        type=ReviewItemType.PROGRAM,
        ministry=ministry,
        total_amount=total_amount,
        flag_reason=list(reasons),
    )


def program_review_items(grants: Iterable[Grant], labels: dict[str, list[str]]) -> list[ReviewItem]:
    """
    Review items for every program with at least one labeled grant.

    Args:
        grants: Grant records.
        labels: Grant id -> risk labels, as produced by the detection engine.

    Returns:
        One item per (ministry, program), reasons in first-seen order.
    """
    totals: dict[tuple[str, str], float] = {}
    reasons: dict[tuple[str, str], dict] = {}

    for grant in grants:
        key = (grant.ministry, grant.program)
        totals[key] = totals.get(key, 0.0) + grant.amount
        seen = reasons.setdefault(key, {})
        for label in labels.get(grant.id, []):
            seen.setdefault(label, None)

    return [
        review_item_for_program(ministry, program, totals[(ministry, program)], list(reasons[(ministry, program)]))
        for ministry, program in totals
        if reasons[(ministry, program)]
    ]
