"""Fiscal year normalization utilities.

Government fiscal years are labelled "YYYY-YYYY", e.g. "2023-2024" for the
year running April 1, 2023 through March 31, 2024. Labels are zero-padded and
monotonic, so plain string ordering is chronological ordering.
"""

import re
from typing import Iterable, Optional

ALL_YEARS = "ALL YEARS"

FISCAL_YEAR_PATTERN = re.compile(r"^(\d{4})-(\d{4})$")


def is_valid_fiscal_year(label: Optional[str]) -> bool:
    """Check a label is "YYYY-YYYY" with consecutive years."""
    if not isinstance(label, str):
        return False
    match = FISCAL_YEAR_PATTERN.match(label)
    if not match:
        return False
    return int(match.group(2)) == int(match.group(1)) + 1


def sorted_fiscal_years(labels: Iterable[str]) -> list[str]:
    """Distinct fiscal year labels in chronological order."""
    return sorted(set(labels))


def previous_fiscal_year(label: str, known_years: Iterable[str]) -> Optional[str]:
    """
    Get the fiscal year immediately before `label` among `known_years`.

    Returns None when `label` is the earliest known year.
    """
    earlier = [y for y in set(known_years) if y < label]
    return max(earlier) if earlier else None
