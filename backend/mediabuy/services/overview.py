from __future__ import annotations

from datetime import date
from typing import Any, Iterable

from mediabuy.services.aggregation import aggregate
from mediabuy.services.caps import cap_lookup, cap_status
from mediabuy.services.highlights import WEEK_DAYS
from mediabuy.services.records import Record, filter_by_interval, group_by, network_offer_key
from mediabuy.services.trends import classify_tiered_trend, percentage_trend
from mediabuy.services.windows import trailing_days


def _overview_key(record: Record) -> tuple[str, str, str]:
    network, offer = network_offer_key(record)
    return (network, offer, record.buyer)


def trend_percent(target_profit: float, avg_daily_profit: float) -> float:
    if not avg_daily_profit:
        return 100.0
    return (target_profit - avg_daily_profit) / abs(avg_daily_profit) * 100


def overview_rows(
    records: Iterable[Record],
    anchor: date | None,
    caps: dict[str, float] | None = None,
) -> list[dict[str, Any]]:
    """Anchor day against the trailing week for every network/offer/buyer."""
    if anchor is None:
        return []
    caps = caps or {}
    week_records = filter_by_interval(records, trailing_days(anchor, WEEK_DAYS))

    rows = []
    for (network, offer, buyer), group_records in group_by(week_records, _overview_key).items():
        week = aggregate(group_records)
        target = aggregate(record for record in group_records if record.date == anchor)
        avg_daily_profit = week.profit / WEEK_DAYS
        cap = cap_lookup(caps, network, offer)
        rows.append(
            {
                "network": network,
                "offer": offer,
                "buyer": buyer,
                "avg_daily_profit": avg_daily_profit,
                "target_profit": target.profit,
                "week_roas": week.roas,
                "target_roas": target.roas,
                "trend_pct": trend_percent(target.profit, avg_daily_profit),
                "trend": percentage_trend(target.profit, avg_daily_profit).as_dict(),
                "tiered_trend": classify_tiered_trend(target.profit, avg_daily_profit).as_dict(),
                "daily_cap": cap,
                "cap_status": cap_status(cap),
            }
        )
    rows.sort(key=lambda row: row["target_profit"], reverse=True)
    return rows
