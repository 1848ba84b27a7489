import io
from datetime import date, datetime

import pytest
from helpers import make_record
from openpyxl import Workbook

from mediabuy.services.ingestion import (
    SheetReadError,
    fetch_batch,
    parse_date,
    parse_money,
    parse_sheet_rows,
    read_csv_rows,
    read_sheet,
    read_xlsx_rows,
    replace_records,
)

HEADER = ["Date", "Media Buyer", "Offer", "Network", "Ad Account", "Ad Revenue", "Ad Spend", "Profit"]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("$1,234.50", 1234.5),
        ("(12.00)", -12.0),
        ("€ 40", 40.0),
        ("", 0.0),
        (None, 0.0),
        (15, 15.0),
        ("abc", None),
        ("NaN", None),
        ("inf", None),
        ("-Infinity", None),
        (float("nan"), None),
    ],
)
def test_parse_money(raw, expected) -> None:
    assert parse_money(raw) == expected


def test_parse_date_formats() -> None:
    assert parse_date("03/15/2024") == date(2024, 3, 15)
    assert parse_date("2024-03-15") == date(2024, 3, 15)
    assert parse_date(datetime(2024, 3, 15, 8, 30)) == date(2024, 3, 15)
    assert parse_date("15.03.2024") is None
    assert parse_date("") is None


def test_parse_sheet_rows_with_header_drops_bad_rows() -> None:
    rows = [
        HEADER,
        ["03/15/2024", "Alice", "Offer1", "NetA", "Acc1", "$1,500.00", "$1,000.00", "$500.00"],
        ["not a date", "Alice", "Offer1", "NetA", "Acc1", "10", "5", "5"],
        ["03/15/2024", "", "Offer1", "NetA", "Acc1", "10", "5", "5"],
        ["03/15/2024", "Bob", "Offer1", "NetA", "Acc1", "lots", "5", "5"],
        ["03/15/2024", "Bob", "Offer1", "NetA", "Acc1", "10", "-5", "15"],
        ["", "", "", "", "", "", "", ""],
    ]

    report = parse_sheet_rows(rows)

    assert report.total_rows == 5
    assert report.accepted_rows == 1
    assert report.dropped == {
        "invalid_date": 1,
        "missing_buyer_or_network": 1,
        "invalid_amount": 1,
        "negative_amount": 1,
    }
    record = report.records[0]
    assert (record.buyer, record.network, record.offer, record.account) == (
        "Alice",
        "NetA",
        "Offer1",
        "Acc1",
    )
    assert (record.revenue, record.spend, record.profit) == (1500.0, 1000.0, 500.0)


def test_parse_sheet_rows_positional_layout() -> None:
    rows = [
        ["1", "03/14/2024", "Alice", "ACA", "Suited", "Acc1", "300", "200", "100"],
        ["2", "03/15/2024", "Bob", "Offer1", "NetA", "Acc2", "50", "100", "-50"],
        ["3", "03/15/2024", "Bob"],
    ]

    report = parse_sheet_rows(rows)

    assert report.accepted_rows == 2
    assert report.dropped == {"too_few_columns": 1}
    assert report.records[0].network == "Suited"
    assert report.records[1].profit == -50.0


def test_read_csv_rows_strips_bom() -> None:
    content = b"\xef\xbb\xbfDate,Media Buyer,Network\n03/15/2024,Alice,NetA\n"

    rows = read_csv_rows(content)

    assert rows[0] == ["Date", "Media Buyer", "Network"]
    assert rows[1] == ["03/15/2024", "Alice", "NetA"]


def test_read_xlsx_rows_uses_named_sheet() -> None:
    workbook = Workbook()
    workbook.active.title = "Summary"
    sheet = workbook.create_sheet("raw data")
    sheet.append(HEADER)
    sheet.append([datetime(2024, 3, 15), "Alice", "Offer1", "NetA", "Acc1", 300, 200, 100])
    buffer = io.BytesIO()
    workbook.save(buffer)

    rows = read_sheet("report.xlsx", buffer.getvalue(), "raw data")
    report = parse_sheet_rows(rows)

    assert report.accepted_rows == 1
    assert report.records[0].date == date(2024, 3, 15)
    assert report.records[0].profit == 100.0


def test_read_xlsx_rows_rejects_invalid_workbook() -> None:
    with pytest.raises(SheetReadError):
        read_xlsx_rows(b"definitely not a workbook")


def test_replace_records_round_trips_through_database(session_factory) -> None:
    records = [
        make_record(date(2024, 3, 14)),
        make_record(date(2024, 3, 15), buyer="Bob", spend=20.0, revenue=10.0),
    ]

    with session_factory() as db:
        replace_records(db, [make_record(date(2024, 1, 1))])
        assert replace_records(db, records) == 2
        assert fetch_batch(db) == records


def test_non_finite_amounts_are_dropped() -> None:
    rows = [
        HEADER,
        ["03/15/2024", "Alice", "Offer1", "NetA", "Acc1", "NaN", "inf", "5"],
        ["03/15/2024", "Alice", "Offer1", "NetA", "Acc1", "10", "5", "Infinity"],
        ["03/15/2024", "Bob", "Offer1", "NetA", "Acc1", "10", "5", "5"],
    ]

    report = parse_sheet_rows(rows)

    assert report.accepted_rows == 1
    assert report.dropped == {"invalid_amount": 2}
    assert report.records[0].buyer == "Bob"


def test_header_layout_drops_rows_missing_money_columns() -> None:
    rows = [
        HEADER,
        ["03/15/2024", "Alice", "Offer1", "NetA"],
        ["03/15/2024", "Bob", "Offer1", "NetA", "Acc1", "10", "5", "5"],
    ]

    report = parse_sheet_rows(rows)

    assert report.accepted_rows == 1
    assert report.dropped == {"too_few_columns": 1}
    assert report.records[0].buyer == "Bob"
