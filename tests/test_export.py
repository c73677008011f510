"""Tests for CSV export."""

from datetime import date, datetime

from grantaudit.data import Grant, ReviewItem, ReviewItemType
from grantaudit.export import (
    CSV_HEADER,
    FLAGGED_PREFIX,
    export_filename,
    generate_csv,
    generate_review_csv,
    write_export,
)


def test_header_only_for_empty_list():
    assert generate_csv([]) == CSV_HEADER + "\n"


def test_row_format(grants):
    lines = generate_csv(grants[:1]).split("\n")
    assert lines[0] == "ID,Ministry,Program,Recipient,Fiscal Year,Amount,Flagged,Flag Reason"
    assert lines[1] == '1,"HEALTH","Healthcare Facilities","Alberta Health Services","2023-2024",15400000,false,""'


def test_flagged_row(grants):
    row = generate_csv([grants[7]]).split("\n")[1]
    assert row.endswith(',3700000,true,"Disbursement timing anomaly"')


def test_rows_keep_given_order(grants):
    lines = generate_csv(list(reversed(grants))).split("\n")[1:]
    assert [line.split(",")[0] for line in lines] == [g.id for g in reversed(grants)]


def test_fractional_amount_and_embedded_quotes():
    grant = Grant("9", "HEALTH", 'The "Best" Program', "R", "2023-2024", 1234.5)
    row = generate_csv([grant]).split("\n")[1]
    assert '"The ""Best"" Program"' in row
    assert ",1234.5," in row


def test_export_filename():
    assert export_filename(today=date(2024, 5, 1)) == "grants_export_2024-05-01.csv"
    assert export_filename(FLAGGED_PREFIX, date(2024, 5, 1)) == "flagged_grants_2024-05-01.csv"


def test_write_export(tmp_path, grants):
    path = write_export(generate_csv(grants), directory=tmp_path / "out", today=date(2024, 5, 1))
    assert path.name == "grants_export_2024-05-01.csv"
    assert path.read_text().startswith(CSV_HEADER)


def test_exported_file_loads_back(tmp_path, grants):
    from grantaudit.data import GrantStore

    path = write_export(generate_csv(grants), directory=tmp_path)
    store = GrantStore.from_file(path)
    assert store.all() == grants


def test_review_csv():
    item = ReviewItem(
        id="acme-inc",
        name="Acme, Inc",
        type=ReviewItemType.RECIPIENT,
        total_amount=6_000_000,
        flag_reason=["Corporate Welfare", "Multiple Grants (3)"],
        program_count=2,
        date_added=datetime(2024, 5, 1, 9, 30),
    )
    lines = generate_review_csv([item]).splitlines()
    assert lines[0] == "ID,Name,Type,Ministry,Total Amount,Program Count,Flag Reasons,Date Added"
    assert lines[1] == 'acme-inc,"Acme, Inc",recipient,,6000000,2,Corporate Welfare; Multiple Grants (3),2024-05-01T09:30:00'
