from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable

from mediabuy.services.records import Record
from mediabuy.services.windows import DateInterval

NOT_AVAILABLE = "N/A"


def safe_roi(profit: float, spend: float) -> float | None:
    if spend == 0:
        return None
    return profit / spend * 100


def safe_roas(revenue: float, spend: float) -> float | None:
    if spend == 0:
        return None
    return revenue / spend


@dataclass(frozen=True)
class AggregateMetrics:
    """Summed money fields of a record set.

    ``roi`` and ``roas`` are ``None`` when spend is zero; they are never
    coerced to 0 so that "no spend" stays distinguishable from a 0% return.
    """

    spend: float = 0.0
    revenue: float = 0.0
    profit: float = 0.0

    @property
    def roi(self) -> float | None:
        return safe_roi(self.profit, self.spend)

    @property
    def roas(self) -> float | None:
        return safe_roas(self.revenue, self.spend)

    def __add__(self, other: AggregateMetrics) -> AggregateMetrics:
        if not isinstance(other, AggregateMetrics):
            return NotImplemented
        return AggregateMetrics(
            spend=self.spend + other.spend,
            revenue=self.revenue + other.revenue,
            profit=self.profit + other.profit,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "spend": self.spend,
            "revenue": self.revenue,
            "profit": self.profit,
            "roi": self.roi,
            "roas": self.roas,
        }


@dataclass(frozen=True)
class DailyPoint:
    date: date
    spend: float = 0.0
    revenue: float = 0.0
    profit: float = 0.0

    @property
    def roi(self) -> float | None:
        return safe_roi(self.profit, self.spend)


def aggregate(records: Iterable[Record]) -> AggregateMetrics:
    spend = revenue = profit = 0.0
    for record in records:
        spend += record.spend
        revenue += record.revenue
        profit += record.profit
    return AggregateMetrics(spend=spend, revenue=revenue, profit=profit)


def daily_series(records: Iterable[Record], interval: DateInterval) -> list[DailyPoint]:
    totals: dict[date, list[float]] = {day: [0.0, 0.0, 0.0] for day in interval.dates()}
    for record in records:
        bucket = totals.get(record.date)
        if bucket is None:
            continue
        bucket[0] += record.spend
        bucket[1] += record.revenue
        bucket[2] += record.profit
    return [
        DailyPoint(date=day, spend=values[0], revenue=values[1], profit=values[2])
        for day, values in totals.items()
    ]


def format_dollar(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_percent(value: float | None) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{value:.1f}%"


def format_ratio(value: float | None) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{value:.2f}x"
