"""Risk detection module for Grant Audit."""

from .engine import DetectionEngine, classify_grant, run_detection
from .criteria import CriteriaSet, DEFAULT_CRITERIA, DEFAULT_THRESHOLDS, merge_thresholds
from .recipients import (
    RecipientSummary,
    compute_recipient_grant_counts,
    multiple_grant_recipients,
    summarize_recipients,
    review_item_for_recipient,
)
from . import recipients
from . import duplicates
from . import anomalies
from . import year_over_year
from . import concentration

__all__ = [
    "DetectionEngine",
    "classify_grant",
    "run_detection",
    "CriteriaSet",
    "DEFAULT_CRITERIA",
    "DEFAULT_THRESHOLDS",
    "merge_thresholds",
    "RecipientSummary",
    "compute_recipient_grant_counts",
    "multiple_grant_recipients",
    "summarize_recipients",
    "review_item_for_recipient",
    "recipients",
    "duplicates",
    "anomalies",
    "year_over_year",
    "concentration",
]
