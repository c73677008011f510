"""CSV export module for Grant Audit."""

from .csv_export import (
    CSV_HEADER,
    GRANTS_PREFIX,
    FLAGGED_PREFIX,
    REVIEW_PREFIX,
    format_row,
    generate_csv,
    generate_review_csv,
    export_filename,
    write_export,
)

__all__ = [
    "CSV_HEADER",
    "GRANTS_PREFIX",
    "FLAGGED_PREFIX",
    "REVIEW_PREFIX",
    "format_row",
    "generate_csv",
    "generate_review_csv",
    "export_filename",
    "write_export",
]
