"""Flagging criteria and detection thresholds."""

from dataclasses import replace
from typing import Iterator, Optional

from grantaudit.data import FlaggingCriterion


DEFAULT_THRESHOLDS = {
    "corporate_welfare_amount": 5_000_000,
    "large_amount": 10_000_000,
    "multiple_grants_min": 3,
    "outlier_z_threshold": 3.0,
    "yoy_change_ratio": 0.40,
    "concentration_ratio": 0.30,
}

DEFAULT_CRITERIA = [
    FlaggingCriterion("corporate_welfare", "Corporate Welfare", "Corporate recipient (Corp, Ltd, Inc) receives more than $5 million", True),
    FlaggingCriterion("large_amount", "Large Amount", "Grant amount exceeds $10 million", True),
    FlaggingCriterion("multiple_grants", "Multiple Grants", "Recipient appears in three or more grant records", True),
    FlaggingCriterion("potential_duplication", "Potential Duplication", "Same program name appears more than once within a ministry", True),
    FlaggingCriterion("operational_grant", "Operational Grant", "Recipient is a government service, agency, department or authority", True),
    FlaggingCriterion("unusual_increase", "Unusual Increase", "Annual increase exceeds 40% of previous year's funding", True),
    FlaggingCriterion("unusual_decrease", "Unusual Decrease", "Annual decrease exceeds 40% of previous year's funding", True),
    FlaggingCriterion("statistical_outlier", "Statistical Outlier", "Grant amount is more than 3 standard deviations from the mean", True),
    FlaggingCriterion("recipient_concentration", "Recipient Concentration", "Single recipient receives more than 30% of a program's funding", False),
]


def merge_thresholds(thresholds: Optional[dict] = None) -> dict:
    """Defaults overlaid with any configured thresholds."""
    merged = dict(DEFAULT_THRESHOLDS)
    merged.update(thresholds or {})
    return merged


class CriteriaSet:
    """
    The current on/off state of every flagging criterion.

    Passed explicitly into detection; toggling a criterion never touches
    grant records or review state.
    """

    def __init__(self, criteria: Optional[list[FlaggingCriterion]] = None):
        source = criteria if criteria is not None else DEFAULT_CRITERIA
        self._criteria = {c.id: replace(c) for c in source}

    @classmethod
    def from_overrides(cls, overrides: Optional[dict] = None) -> "CriteriaSet":
        """Default criteria with enabled flags taken from `overrides` (id -> bool)."""
        criteria = cls()
        for criterion_id, enabled in (overrides or {}).items():
            if criterion_id in criteria:
                criteria.set_enabled(criterion_id, bool(enabled))
        return criteria

    def __iter__(self) -> Iterator[FlaggingCriterion]:
        return iter(self._criteria.values())

    def __contains__(self, criterion_id: str) -> bool:
        return criterion_id in self._criteria

    def __len__(self) -> int:
        return len(self._criteria)

    def get(self, criterion_id: str) -> FlaggingCriterion:
        if criterion_id not in self._criteria:
            raise ValueError(f"Unknown criterion: {criterion_id}")
        return self._criteria[criterion_id]

    def is_enabled(self, criterion_id: str) -> bool:
        criterion = self._criteria.get(criterion_id)
        return criterion is not None and criterion.enabled

    def set_enabled(self, criterion_id: str, enabled: bool) -> None:
        self.get(criterion_id).enabled = enabled

    def enabled_ids(self) -> list[str]:
        return [c.id for c in self._criteria.values() if c.enabled]
