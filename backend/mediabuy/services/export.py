from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Iterable

from mediabuy.services.records import Record

EXPORT_COLUMNS = [
    "Date",
    "Media Buyer",
    "Ad Account",
    "Offer",
    "Network",
    "Spend",
    "Revenue",
    "Profit",
]

EXPORT_DATE_FORMAT = "%m/%d/%Y"


def export_row(record: Record) -> list[str]:
    return [
        record.date.strftime(EXPORT_DATE_FORMAT),
        record.buyer,
        record.account,
        record.offer,
        record.network,
        f"{record.spend:.2f}",
        f"{record.revenue:.2f}",
        f"{record.profit:.2f}",
    ]


def export_records_csv(records: Iterable[Record]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for record in records:
        writer.writerow(export_row(record))
    return buffer.getvalue()


def parse_export(content: str) -> list[Record]:
    reader = csv.DictReader(io.StringIO(content))
    if reader.fieldnames != EXPORT_COLUMNS:
        raise ValueError("Unexpected export columns")
    return [
        Record(
            date=datetime.strptime(row["Date"], EXPORT_DATE_FORMAT).date(),
            buyer=row["Media Buyer"],
            account=row["Ad Account"],
            offer=row["Offer"],
            network=row["Network"],
            spend=float(row["Spend"]),
            revenue=float(row["Revenue"]),
            profit=float(row["Profit"]),
        )
        for row in reader
    ]


def export_filename(start: str, end: str) -> str:
    return f"media-buying-{start}-to-{end}.csv"
