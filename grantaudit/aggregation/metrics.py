"""Headline metrics for the dashboard and flagged-items views."""

from dataclasses import dataclass
from typing import Iterable

from grantaudit.data import Grant, KeyMetric


@dataclass
class FlaggedSummary:
    """Counts and value for the flagged-items view."""
    flagged_count: int
    total_count: int
    flagging_rate: float  # percent of all grants
    value_at_risk: float


def format_currency(amount: float) -> str:
    """Format a dollar amount, e.g. $15,400,000.00"""
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"


def format_compact(amount: float) -> str:
    """Format a large dollar amount for charts and summaries, e.g. $1.2B"""
    for divisor, suffix in ((1e9, "B"), (1e6, "M"), (1e3, "K")):
        if abs(amount) >= divisor:
            return f"${amount / divisor:.1f}{suffix}"
    return f"${amount:,.0f}"


def compute_key_metrics(grants: Iterable[Grant]) -> list[KeyMetric]:
    """Key metrics computed from a set of grant records."""
    grants = list(grants)

    return [
        KeyMetric("Number of Grants", len(grants), "Total number of grants across all ministries"),
        KeyMetric("Total Grant Value", format_currency(sum(g.amount for g in grants)), "Total funding disbursed across all years"),
        KeyMetric("Fiscal Years", len({g.fiscal_year for g in grants}), "Number of fiscal years covered in the data"),
        KeyMetric("Grant Programs", len({g.program for g in grants}), "Unique programs receiving funding"),
        KeyMetric("Grant Recipients", len({g.recipient for g in grants}), "Unique recipients receiving grants"),
    ]


def summarize_flagged(grants: Iterable[Grant]) -> FlaggedSummary:
    """Flagged count, flagging rate and total value of flagged grants."""
    grants = list(grants)
    flagged = [g for g in grants if g.flagged]

    rate = (len(flagged) / len(grants) * 100) if grants else 0.0

    return FlaggedSummary(
        flagged_count=len(flagged),
        total_count=len(grants),
        flagging_rate=round(rate, 1),
        value_at_risk=sum(g.amount for g in flagged),
    )
