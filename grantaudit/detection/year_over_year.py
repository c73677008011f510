"""
Year-over-Year Funding Change Detection.

Compares each program's total funding in a fiscal year against the previous
fiscal year in the dataset, and flags swings larger than the configured
ratio (default 40%) in either direction:

    |total(Y) - total(Y-1)| / total(Y-1) > ratio

A program with no funding in the previous year is not evaluated.
"""

from collections import defaultdict
from typing import NamedTuple, Optional

from grantaudit.data import Grant
from grantaudit.normalization import previous_fiscal_year, sorted_fiscal_years

UNUSUAL_INCREASE = "Unusual Increase"
UNUSUAL_DECREASE = "Unusual Decrease"


class ProgramYearChange(NamedTuple):
    """Funding change for one program between two fiscal years."""
    ministry: str
    program: str
    fiscal_year: str
    previous_year: str
    total: float
    previous_total: float

    @property
    def change_ratio(self) -> float:
        return (self.total - self.previous_total) / self.previous_total


def program_year_totals(grants: list[Grant]) -> dict[tuple[str, str], dict[str, float]]:
    """Funding per (ministry, program) per fiscal year."""
    totals = defaultdict(lambda: defaultdict(float))
    for g in grants:
        totals[(g.ministry, g.program)][g.fiscal_year] += g.amount
    return totals


def program_year_changes(grants: list[Grant]) -> list[ProgramYearChange]:
    """Every evaluable year-over-year change, program by program."""
    known_years = sorted_fiscal_years(g.fiscal_year for g in grants)
    changes = []

    for (ministry, program), by_year in program_year_totals(grants).items():
        for year in sorted(by_year):
            prior: Optional[str] = previous_fiscal_year(year, known_years)
            if prior is None or prior not in by_year:
                continue
            if by_year[prior] <= 0:
                continue
            changes.append(ProgramYearChange(
                ministry=ministry,
                program=program,
                fiscal_year=year,
                previous_year=prior,
                total=by_year[year],
                previous_total=by_year[prior],
            ))

    return changes


def _flag_changes(grants: list[Grant], thresholds: dict, increase: bool) -> dict[str, str]:
    ratio = float(thresholds.get("yoy_change_ratio", 0.40))

    hits = set()
    for change in program_year_changes(grants):
        if increase and change.change_ratio > ratio:
            hits.add((change.ministry, change.program, change.fiscal_year))
        elif not increase and change.change_ratio < -ratio:
            hits.add((change.ministry, change.program, change.fiscal_year))

    label = UNUSUAL_INCREASE if increase else UNUSUAL_DECREASE
    return {
        g.id: label
        for g in grants
        if (g.ministry, g.program, g.fiscal_year) in hits
    }


def detect_unusual_increase(grants: list[Grant], thresholds: dict) -> dict[str, str]:
    return _flag_changes(grants, thresholds, increase=True)


def detect_unusual_decrease(grants: list[Grant], thresholds: dict) -> dict[str, str]:
    return _flag_changes(grants, thresholds, increase=False)
