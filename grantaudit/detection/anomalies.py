"""
Statistical Outlier Detection.

Flags grants whose amount deviates strongly from the other grants in the
same (ministry, program) category:

    Z = (amount - mean) / stddev

using the population standard deviation of the category. A category where
every amount is identical (stddev 0) has no outliers.
"""

from collections import defaultdict
from statistics import fmean, pstdev
from typing import NamedTuple

from grantaudit.data import Grant

STATISTICAL_OUTLIER = "Statistical Outlier"


class CategoryStats(NamedTuple):
    """Amount statistics for one (ministry, program) category."""
    count: int
    mean: float
    stddev: float


def category_statistics(grants: list[Grant]) -> dict[tuple[str, str], CategoryStats]:
    """Mean and population stddev of amounts per (ministry, program)."""
    amounts = defaultdict(list)
    for g in grants:
        amounts[(g.ministry, g.program)].append(g.amount)

    return {
        key: CategoryStats(len(values), fmean(values), pstdev(values))
        for key, values in amounts.items()
    }


def z_score(amount: float, stats: CategoryStats) -> float:
    """Z-score of an amount within its category; 0.0 when stddev is 0."""
    if stats.stddev == 0:
        return 0.0
    return (amount - stats.mean) / stats.stddev


def detect_outliers(grants: list[Grant], thresholds: dict) -> dict[str, str]:
    limit = float(thresholds.get("outlier_z_threshold", 3.0))
    stats = category_statistics(grants)

    flagged = {}
    for g in grants:
        category = stats[(g.ministry, g.program)]
        if category.stddev == 0:
            continue
        if abs(z_score(g.amount, category)) > limit:
            flagged[g.id] = STATISTICAL_OUTLIER
    return flagged
