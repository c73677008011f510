"""Grant records and bundled sample data."""

from .models import (
    ALL_MINISTRIES,
    OTHER_MINISTRIES,
    OTHER_COLOR,
    Grant,
    MinistryTotal,
    YearlyTotal,
    KeyMetric,
    FlaggingCriterion,
    ReviewItem,
    ReviewItemType,
)
from .sample import (
    SAMPLE_GRANTS,
    YEARLY_TOTALS,
    MINISTRY_TOTALS,
    DATASET_METRICS,
    MINISTRIES,
    FISCAL_YEARS,
    sample_grants,
)
from .store import GrantStore, read_records, parse_records

__all__ = [
    "ALL_MINISTRIES",
    "OTHER_MINISTRIES",
    "OTHER_COLOR",
    "Grant",
    "MinistryTotal",
    "YearlyTotal",
    "KeyMetric",
    "FlaggingCriterion",
    "ReviewItem",
    "ReviewItemType",
    "SAMPLE_GRANTS",
    "YEARLY_TOTALS",
    "MINISTRY_TOTALS",
    "DATASET_METRICS",
    "MINISTRIES",
    "FISCAL_YEARS",
    "sample_grants",
    "GrantStore",
    "read_records",
    "parse_records",
]
