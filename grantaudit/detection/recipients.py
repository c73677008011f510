"""
Recipient-based risk detection.

Labels grants by who receives them:
- Corporate recipients receiving large grants ("corporate welfare")
- Very large grants
- Recipients appearing across many grant records
- Government operating bodies (used to exclude them from welfare views)

Also builds the per-recipient summaries behind the top-recipients and
multiple-grant-programs views.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional

from grantaudit.data import Grant, ReviewItem, ReviewItemType
from grantaudit.normalization import is_corporate_name, is_operational_name, slugify
from .criteria import CriteriaSet, merge_thresholds

CORPORATE_WELFARE = "Corporate Welfare"
LARGE_AMOUNT = "Large Amount"
OPERATIONAL_GRANT = "Operational Grant"


def multiple_grants_label(count: int) -> str:
    return f"Multiple Grants ({count})"


@dataclass
class RecipientSummary:
    """Aggregate view of one recipient across its grants."""
    id: str
    name: str
    total_amount: float = 0.0
    grant_count: int = 0
    program_count: int = 0
    risk_factors: list[str] = field(default_factory=list)
    is_flagged: bool = False


def compute_recipient_grant_counts(grants: Iterable[Grant]) -> dict[str, int]:
    """Number of grant records per recipient name, first-seen order."""
    return dict(Counter(g.recipient for g in grants))


def detect_corporate_welfare(grants: list[Grant], thresholds: dict) -> dict[str, str]:
    """Corporate-named recipients with a grant above the welfare amount."""
    limit = thresholds.get("corporate_welfare_amount", 5_000_000)
    return {
        g.id: CORPORATE_WELFARE
        for g in grants
        if is_corporate_name(g.recipient) and g.amount > limit
    }


def detect_large_amount(grants: list[Grant], thresholds: dict) -> dict[str, str]:
    """Grants above the large-amount limit."""
    limit = thresholds.get("large_amount", 10_000_000)
    return {g.id: LARGE_AMOUNT for g in grants if g.amount > limit}


def detect_multiple_grants(grants: list[Grant], thresholds: dict) -> dict[str, str]:
    """Grants whose recipient appears in at least `multiple_grants_min` records."""
    minimum = thresholds.get("multiple_grants_min", 3)
    counts = compute_recipient_grant_counts(grants)
    return {
        g.id: multiple_grants_label(counts[g.recipient])
        for g in grants
        if counts[g.recipient] >= minimum
    }


def detect_operational(grants: list[Grant], thresholds: dict) -> dict[str, str]:
    """Grants to government services, agencies, departments or authorities."""
    return {g.id: OPERATIONAL_GRANT for g in grants if is_operational_name(g.recipient)}


def multiple_grant_recipients(grants: Iterable[Grant], minimum: int = 3) -> list[tuple[str, int]]:
    """
    Recipients with at least `minimum` grant records, most records first.

    Ties keep first-seen order.
    """
    counts = compute_recipient_grant_counts(grants)
    ranked = [(name, count) for name, count in counts.items() if count >= minimum]
    ranked.sort(key=lambda item: item[1], reverse=True)
    return ranked


def summarize_recipients(
    grants: Iterable[Grant],
    criteria: Optional[CriteriaSet] = None,
    thresholds: Optional[dict] = None,
    reviewed_ids: Iterable[str] = (),
) -> list[RecipientSummary]:
    """
    Per-recipient totals and risk factors, largest total first.

    Risk factors are evaluated on the recipient's combined total, honoring
    the enabled criteria. `reviewed_ids` marks recipients already on the
    review list.
    """
    criteria = criteria or CriteriaSet()
    thresholds = merge_thresholds(thresholds)
    reviewed = set(reviewed_ids)

    summaries: dict[str, RecipientSummary] = {}
    programs: dict[str, set] = {}

    for grant in grants:
        summary = summaries.get(grant.recipient)
        if summary is None:
            summary = RecipientSummary(id=slugify(grant.recipient), name=grant.recipient)
            summaries[grant.recipient] = summary
            programs[grant.recipient] = set()
        summary.total_amount += grant.amount
        summary.grant_count += 1
        programs[grant.recipient].add((grant.ministry, grant.program))

    for name, summary in summaries.items():
        summary.program_count = len(programs[name])
        summary.is_flagged = summary.id in reviewed

        factors = []
        if (
            criteria.is_enabled("corporate_welfare")
            and is_corporate_name(name)
            and summary.total_amount > thresholds["corporate_welfare_amount"]
        ):
            factors.append(CORPORATE_WELFARE)
        if criteria.is_enabled("large_amount") and summary.total_amount > thresholds["large_amount"]:
            factors.append(LARGE_AMOUNT)
        if criteria.is_enabled("multiple_grants") and summary.grant_count >= thresholds["multiple_grants_min"]:
            factors.append(multiple_grants_label(summary.grant_count))
        if criteria.is_enabled("operational_grant") and is_operational_name(name):
            factors.append(OPERATIONAL_GRANT)
        summary.risk_factors = factors

    return sorted(summaries.values(), key=lambda s: s.total_amount, reverse=True)


def review_item_for_recipient(summary: RecipientSummary) -> ReviewItem:
    """Build a review list entry from a recipient summary."""
    return ReviewItem(
        id=summary.id,
        name=summary.name,
        type=ReviewItemType.RECIPIENT,
        total_amount=summary.total_amount,
        program_count=summary.program_count,
        flag_reason=list(summary.risk_factors),
    )
