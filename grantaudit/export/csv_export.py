"""CSV export of grant records and the review list."""

import csv
import io
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from grantaudit.data import Grant, ReviewItem

CSV_HEADER = "ID,Ministry,Program,Recipient,Fiscal Year,Amount,Flagged,Flag Reason"

GRANTS_PREFIX = "grants_export"
FLAGGED_PREFIX = "flagged_grants"
REVIEW_PREFIX = "review_list"

REVIEW_HEADER = [
    "ID", "Name", "Type", "Ministry", "Total Amount",
    "Program Count", "Flag Reasons", "Date Added",
]


def _quote(value: Optional[str]) -> str:
    text = value or ""
    return '"' + text.replace('"', '""') + '"'


def _format_amount(amount: float) -> str:
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


def format_row(grant: Grant) -> str:
    """One CSV line for a grant; string fields are double-quoted."""
    return ",".join([
        grant.id,
        _quote(grant.ministry),
        _quote(grant.program),
        _quote(grant.recipient),
        _quote(grant.fiscal_year),
        _format_amount(grant.amount),
        "true" if grant.flagged else "false",
        _quote(grant.flag_reason),
    ])


def generate_csv(grants: Iterable[Grant]) -> str:
    """
    Serialize grants, in the given order, to CSV text.

    The header line is always present; rows follow, newline-separated.
    """
    rows = "\n".join(format_row(g) for g in grants)
    return f"{CSV_HEADER}\n{rows}"


def export_filename(prefix: str = GRANTS_PREFIX, today: Optional[date] = None) -> str:
    """File name for an export, e.g. grants_export_2024-05-01.csv"""
    today = today or date.today()
    return f"{prefix}_{today.isoformat()}.csv"


def generate_review_csv(items: Iterable[ReviewItem]) -> str:
    """Serialize review list entries to CSV text."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(REVIEW_HEADER)
    for item in items:
        writer.writerow([
            item.id,
            item.name,
            item.type.value,
            item.ministry or "",
            _format_amount(item.total_amount),
            item.program_count if item.program_count is not None else "",
            "; ".join(item.flag_reason),
            item.date_added.isoformat() if item.date_added else "",
        ])
    return buffer.getvalue()


def write_export(
    content: str,
    prefix: str = GRANTS_PREFIX,
    directory: Optional[Path] = None,
    today: Optional[date] = None,
) -> Path:
    """
    Write CSV text to `<directory>/<prefix>_<ISO-date>.csv`.

    Returns:
        Path of the written file.
    """
    if directory is None:
        from grantaudit.config import config
        directory = config.export_dir

    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    path = directory / export_filename(prefix, today)
    path.write_text(content, encoding="utf-8")
    return path
