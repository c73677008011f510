"""
Ministry and fiscal-year funding totals.

Record-level totals are exact sums. When only the published all-years
ministry totals are available, a single year's figures are estimated by
scaling each ministry by that year's share of all-years funding; those
entries carry `estimated=True`.
"""

from collections import defaultdict
from dataclasses import dataclass, replace
from typing import Iterable, Optional

from grantaudit.data import (
    ALL_MINISTRIES,
    OTHER_MINISTRIES,
    OTHER_COLOR,
    MINISTRY_TOTALS,
    YEARLY_TOTALS,
    Grant,
    MinistryTotal,
    YearlyTotal,
)
from grantaudit.normalization import ALL_YEARS


DEFAULT_CONSOLIDATION_THRESHOLD = 0.02

PALETTE = [
    "#3498db", "#2ecc71", "#9b59b6", "#e74c3c", "#f39c12",
    "#1abc9c", "#d35400", "#27ae60", "#2980b9", "#8e44ad",
    "#c0392b", "#16a085", "#f1c40f", "#7f8c8d", "#e67e22",
]

KNOWN_COLORS = {m.ministry: m.color for m in MINISTRY_TOTALS}


@dataclass
class ProgramTotal:
    """Summed funding for one program within a ministry."""
    name: str
    total: float
    color: str


def ministry_color(ministry: str, index: int) -> str:
    """Display color for a ministry; `index` picks from the palette for unknown names."""
    return KNOWN_COLORS.get(ministry, PALETTE[index % len(PALETTE)])


def compute_ministry_totals(
    grants: Optional[Iterable[Grant]] = None,
    year_filter: str = ALL_YEARS,
    ministry_totals: Optional[list[MinistryTotal]] = None,
    yearly_totals: Optional[list[YearlyTotal]] = None,
) -> list[MinistryTotal]:
    """
    Sum funding per ministry.

    Args:
        grants: Grant records. When given, totals are summed exactly from
            the records matching `year_filter`.
        year_filter: A fiscal year label or ALL_YEARS.
        ministry_totals: Precomputed all-years totals, used only when no
            grant records are given (defaults to the published totals).
        yearly_totals: Per-year totals used to scale precomputed figures.

    Returns:
        One entry per ministry in the source, in first-seen order. A
        ministry with no grants in the selected year is reported as 0.
    """
    if grants is not None:
        totals: dict[str, float] = {}
        for grant in grants:
            totals.setdefault(grant.ministry, 0.0)
            if year_filter == ALL_YEARS or grant.fiscal_year == year_filter:
                totals[grant.ministry] += grant.amount

        return [
            MinistryTotal(ministry, total, ministry_color(ministry, i))
            for i, (ministry, total) in enumerate(totals.items())
        ]

    source = ministry_totals if ministry_totals is not None else MINISTRY_TOTALS
    if year_filter == ALL_YEARS:
        return [replace(m) for m in source]

    # Approximation: no per-ministry, per-year figures exist at this level
    years = yearly_totals if yearly_totals is not None else YEARLY_TOTALS
    all_years_sum = sum(y.total for y in years)
    year_total = next((y.total for y in years if y.year == year_filter), 0.0)
    ratio = year_total / all_years_sum if all_years_sum else 0.0

    return [
        MinistryTotal(m.ministry, m.total * ratio, m.color, estimated=True)
        for m in source
    ]


def consolidate_small_categories(
    ministry_totals: list[MinistryTotal],
    threshold: float = DEFAULT_CONSOLIDATION_THRESHOLD,
) -> list[MinistryTotal]:
    """
    Merge ministries below `threshold` share into one "Other Ministries" entry.

    Large ministries come first, largest total first; the Other entry is
    appended last and only when at least one ministry was merged. When the
    grand total is zero every ministry is merged. The output always sums to
    the same grand total as the input.
    """
    sum_all = sum(m.total for m in ministry_totals)

    large = []
    small = []
    for m in ministry_totals:
        if sum_all and m.total / sum_all >= threshold:
            large.append(m)
        else:
            small.append(m)

    large.sort(key=lambda m: m.total, reverse=True)
    result = [replace(m) for m in large]

    if small:
        result.append(MinistryTotal(
            ministry=OTHER_MINISTRIES,
            total=sum(m.total for m in small),
            color=OTHER_COLOR,
            estimated=any(m.estimated for m in small),
        ))

    return result


def compute_yearly_totals(grants: Iterable[Grant]) -> list[YearlyTotal]:
    """Sum funding per fiscal year, in chronological order."""
    totals = defaultdict(float)
    for grant in grants:
        totals[grant.fiscal_year] += grant.amount

    return [YearlyTotal(year, totals[year]) for year in sorted(totals)]


def compute_program_breakdown(
    grants: Iterable[Grant],
    ministry: str,
    year_filter: str = ALL_YEARS,
) -> list[ProgramTotal]:
    """
    Sum a ministry's funding per program, largest first.

    Returns an empty list for the ALL_MINISTRIES sentinel.
    """
    if ministry == ALL_MINISTRIES:
        return []

    totals: dict[str, float] = {}
    for grant in grants:
        if grant.ministry != ministry:
            continue
        if year_filter != ALL_YEARS and grant.fiscal_year != year_filter:
            continue
        totals[grant.program] = totals.get(grant.program, 0.0) + grant.amount

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [
        ProgramTotal(name, total, f"hsl({120 + i * 40}, 70%, 60%)")
        for i, (name, total) in enumerate(ranked)
    ]
