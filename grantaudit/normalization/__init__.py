"""Data normalization module for Grant Audit."""

from .fiscal_year import (
    ALL_YEARS,
    is_valid_fiscal_year,
    sorted_fiscal_years,
    previous_fiscal_year,
)
from .names import (
    normalize_name,
    slugify,
    is_corporate_name,
    is_operational_name,
)

__all__ = [
    "ALL_YEARS",
    "is_valid_fiscal_year",
    "sorted_fiscal_years",
    "previous_fiscal_year",
    "normalize_name",
    "slugify",
    "is_corporate_name",
    "is_operational_name",
]
