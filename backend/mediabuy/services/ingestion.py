from __future__ import annotations

import csv
import io
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from mediabuy.models.campaign_record import CampaignRecord
from mediabuy.services.records import Record

logger = logging.getLogger(__name__)

DATE_FORMATS = (
    "%m/%d/%Y",
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
)

RECORD_FIELDS = ("date", "buyer", "offer", "network", "account", "revenue", "spend", "profit")

# Column layout of the "raw data" sheet: a row id followed by the record fields.
SHEET_POSITIONS = {name: index + 1 for index, name in enumerate(RECORD_FIELDS)}
MIN_SHEET_COLUMNS = 9

HEADER_ALIASES = {
    "date": "date",
    "day": "date",
    "media buyer": "buyer",
    "mediabuyer": "buyer",
    "buyer": "buyer",
    "offer": "offer",
    "network": "network",
    "ad account": "account",
    "adaccount": "account",
    "account": "account",
    "ad rev": "revenue",
    "ad revenue": "revenue",
    "adrev": "revenue",
    "revenue": "revenue",
    "ad spend": "spend",
    "adspend": "spend",
    "spend": "spend",
    "profit": "profit",
}

MONEY_STRIP = re.compile(r"[$£€,\s ]")


class SheetReadError(ValueError):
    pass


@dataclass
class IngestionReport:
    total_rows: int = 0
    accepted_rows: int = 0
    dropped: dict[str, int] = field(default_factory=dict)
    records: list[Record] = field(default_factory=list)

    def drop(self, reason: str) -> None:
        self.dropped[reason] = self.dropped.get(reason, 0) + 1

    @property
    def dropped_rows(self) -> int:
        return sum(self.dropped.values())


def parse_date(value: Any) -> date | None:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    cleaned = str(value).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue
    return None


def parse_money(value: Any) -> float | None:
    """Parse a sheet money cell; blank is 0, anything non-numeric is ``None``."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    cleaned = MONEY_STRIP.sub("", str(value))
    if cleaned.startswith("(") and cleaned.endswith(")"):
        cleaned = f"-{cleaned[1:-1]}"
    if cleaned == "":
        return 0.0
    try:
        amount = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(amount):
        return None
    return amount


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def detect_columns(header: list[Any]) -> dict[str, int] | None:
    columns: dict[str, int] = {}
    for index, raw in enumerate(header):
        name = HEADER_ALIASES.get(_text(raw).lower())
        if name and name not in columns:
            columns[name] = index
    if {"date", "buyer", "network"} <= set(columns):
        return columns
    return None


def parse_row(
    row: list[Any],
    columns: dict[str, int],
    report: IngestionReport,
    min_columns: int = MIN_SHEET_COLUMNS,
) -> Record | None:
    if len(row) < min_columns:
        report.drop("too_few_columns")
        return None

    def cell(name: str) -> Any:
        index = columns.get(name)
        if index is None or index >= len(row):
            return None
        return row[index]

    record_date = parse_date(cell("date"))
    if record_date is None:
        report.drop("invalid_date")
        return None
    buyer = _text(cell("buyer"))
    network = _text(cell("network"))
    if not buyer or not network:
        report.drop("missing_buyer_or_network")
        return None

    revenue = parse_money(cell("revenue"))
    spend = parse_money(cell("spend"))
    profit = parse_money(cell("profit"))
    if revenue is None or spend is None or profit is None:
        report.drop("invalid_amount")
        return None
    if revenue < 0 or spend < 0:
        report.drop("negative_amount")
        return None

    return Record(
        date=record_date,
        buyer=buyer,
        network=network,
        offer=_text(cell("offer")),
        account=_text(cell("account")),
        spend=spend,
        revenue=revenue,
        profit=profit,
    )


def parse_sheet_rows(rows: Iterable[list[Any]]) -> IngestionReport:
    """Turn raw sheet rows into records, dropping malformed rows.

    A header row naming the columns is honoured when present; otherwise the
    fixed "raw data" layout is assumed.
    """
    report = IngestionReport()
    iterator = iter(rows)
    first = next(iterator, None)
    if first is None:
        return report

    columns = detect_columns(first)
    pending: Iterable[list[Any]] = iterator
    if columns is None:
        columns = SHEET_POSITIONS
        min_columns = MIN_SHEET_COLUMNS
        pending = [first, *iterator]
    else:
        min_columns = max(columns.values()) + 1

    for row in pending:
        if not any(_text(value) for value in row):
            continue
        report.total_rows += 1
        record = parse_row(list(row), columns, report, min_columns)
        if record is not None:
            report.records.append(record)
    report.accepted_rows = len(report.records)
    if report.dropped:
        logger.info(
            "Dropped %s of %s sheet rows: %s",
            report.dropped_rows,
            report.total_rows,
            report.dropped,
        )
    return report


def read_csv_rows(content: bytes) -> list[list[Any]]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = content.decode("cp1252", errors="replace")
    sample = text[:4096]
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=",;\t")
    except csv.Error:
        dialect = csv.excel
    return [list(row) for row in csv.reader(io.StringIO(text), dialect)]


def read_xlsx_rows(content: bytes, sheet_name: str | None = None) -> list[list[Any]]:
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (BadZipFile, InvalidFileException, KeyError) as exc:
        raise SheetReadError(f"Cannot read workbook: {exc}") from exc
    try:
        if sheet_name and sheet_name in workbook.sheetnames:
            sheet = workbook[sheet_name]
        else:
            sheet = workbook.active
        return [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def read_sheet(filename: str, content: bytes, sheet_name: str | None = None) -> list[list[Any]]:
    if filename.lower().endswith(".xlsx"):
        return read_xlsx_rows(content, sheet_name)
    return read_csv_rows(content)


def fetch_batch(db: Session) -> list[Record]:
    rows = db.scalars(
        select(CampaignRecord).order_by(CampaignRecord.id)
    ).all()
    return [
        Record(
            date=row.date,
            buyer=row.buyer,
            network=row.network,
            offer=row.offer,
            account=row.account,
            spend=row.spend,
            revenue=row.revenue,
            profit=row.profit,
        )
        for row in rows
    ]


def replace_records(db: Session, records: Iterable[Record]) -> int:
    """Replace the stored records with ``records`` in one transaction."""
    rows = [
        CampaignRecord(
            date=record.date,
            buyer=record.buyer,
            network=record.network,
            offer=record.offer,
            account=record.account,
            spend=record.spend,
            revenue=record.revenue,
            profit=record.profit,
        )
        for record in records
    ]
    try:
        db.execute(delete(CampaignRecord))
        db.add_all(rows)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return len(rows)
