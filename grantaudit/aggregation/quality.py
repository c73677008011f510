"""
Data quality assessment.

Checks raw grant rows (as loaded from a file or returned by the API) before
they are turned into Grant records:
- Missing identifiers and free-text fields
- Malformed fiscal year labels
- Missing, non-numeric or negative amounts
"""

import math
from dataclasses import dataclass, field
from typing import Iterable

from grantaudit.normalization import is_valid_fiscal_year

# Warn when more than this share of records has at least one issue
WARNING_PERCENTAGE = 10.0


@dataclass
class FieldIssue:
    """Issue count for one field."""
    field: str
    issue_count: int
    percentage: float


@dataclass
class DataQualityReport:
    """Summary of data quality issues across a record set."""
    total_records: int
    issues_count: int
    issues_by_field: list[FieldIssue] = field(default_factory=list)

    @property
    def issue_percentage(self) -> float:
        if not self.total_records:
            return 0.0
        return self.issues_count / self.total_records * 100

    @property
    def has_warning(self) -> bool:
        return self.issue_percentage > WARNING_PERCENTAGE


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _amount_issue(value) -> bool:
    if _blank(value) or isinstance(value, bool):
        return True
    try:
        amount = float(value)
        return not math.isfinite(amount) or amount < 0
    except (TypeError, ValueError):
        return True


FIELD_CHECKS = [
    ("ID", lambda r: _blank(r.get("id"))),
    ("Ministry", lambda r: _blank(r.get("ministry"))),
    ("Program", lambda r: _blank(r.get("program"))),
    ("Recipient", lambda r: _blank(r.get("recipient"))),
    ("Fiscal Year", lambda r: not is_valid_fiscal_year(r.get("fiscalYear", r.get("fiscal_year")))),
    ("Amount", lambda r: _amount_issue(r.get("amount"))),
]


def assess_data_quality(records: Iterable[dict]) -> DataQualityReport:
    """
    Count data quality issues in raw grant rows.

    A record with several bad fields counts once toward `issues_count` and
    once toward each affected field.
    """
    records = list(records)
    total = len(records)

    field_counts = {name: 0 for name, _ in FIELD_CHECKS}
    records_with_issues = 0

    for record in records:
        has_issue = False
        for name, check in FIELD_CHECKS:
            if check(record):
                field_counts[name] += 1
                has_issue = True
        if has_issue:
            records_with_issues += 1

    issues = [
        FieldIssue(
            field=name,
            issue_count=count,
            percentage=(count / total * 100) if total else 0.0,
        )
        for name, count in field_counts.items()
    ]

    return DataQualityReport(
        total_records=total,
        issues_count=records_with_issues,
        issues_by_field=issues,
    )
