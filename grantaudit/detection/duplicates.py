"""
Duplicate Program Detection.

Flags grants whose (ministry, program) pair appears in more than one
record. Program names are only unique within a ministry, so the same name
under two ministries is not a duplicate.
"""

from collections import Counter

from grantaudit.data import Grant

POTENTIAL_DUPLICATION = "Potential Duplication"


def program_counts(grants: list[Grant]) -> Counter:
    """Number of records per (ministry, program) pair."""
    return Counter((g.ministry, g.program) for g in grants)


def detect_duplicate_programs(grants: list[Grant], thresholds: dict) -> dict[str, str]:
    counts = program_counts(grants)
    return {
        g.id: POTENTIAL_DUPLICATION
        for g in grants
        if counts[(g.ministry, g.program)] > 1
    }
