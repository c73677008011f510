"""Funding aggregation module for Grant Audit."""

from .totals import (
    DEFAULT_CONSOLIDATION_THRESHOLD,
    ProgramTotal,
    compute_ministry_totals,
    consolidate_small_categories,
    compute_yearly_totals,
    compute_program_breakdown,
)
from .metrics import (
    FlaggedSummary,
    format_currency,
    format_compact,
    compute_key_metrics,
    summarize_flagged,
)
from .quality import DataQualityReport, FieldIssue, assess_data_quality

__all__ = [
    "DEFAULT_CONSOLIDATION_THRESHOLD",
    "ProgramTotal",
    "compute_ministry_totals",
    "consolidate_small_categories",
    "compute_yearly_totals",
    "compute_program_breakdown",
    "FlaggedSummary",
    "format_currency",
    "format_compact",
    "compute_key_metrics",
    "summarize_flagged",
    "DataQualityReport",
    "FieldIssue",
    "assess_data_quality",
]
