from __future__ import annotations

from datetime import date
from typing import Any

from mediabuy.services.aggregation import (
    AggregateMetrics,
    aggregate,
    daily_series,
    format_percent,
    format_ratio,
)
from mediabuy.services.records import (
    KEY_FIELDS,
    KEY_FUNCTIONS,
    Batch,
    Record,
    RecordFilters,
    filter_by_interval,
    format_key,
    group_by,
)
from mediabuy.services.trends import (
    classify_tiered_trend,
    classify_trend,
    compute_delta,
    profit_status,
    roi_status,
)
from mediabuy.services.windows import (
    DateInterval,
    DateWindow,
    previous_period,
    resolve_window,
)

SUMMARY_METRICS = ("spend", "revenue", "profit")


def _interval_payload(interval: DateInterval) -> dict[str, Any]:
    return {"from": interval.start, "to": interval.end, "days": interval.days}


def _metrics_payload(metrics: AggregateMetrics) -> dict[str, Any]:
    payload = metrics.as_dict()
    payload["roi_display"] = format_percent(metrics.roi)
    payload["roas_display"] = format_ratio(metrics.roas)
    return payload


def resolve_periods(
    anchor: date,
    window: DateWindow | str,
    custom_start: date | None = None,
) -> tuple[DateInterval, DateInterval]:
    current = resolve_window(window, anchor, custom_start)
    return current, previous_period(current)


def empty_periods_payload() -> dict[str, Any]:
    return {"anchor_date": None, "current_period": None, "previous_period": None}


def window_summary(
    batch: Batch,
    window: DateWindow | str,
    custom_start: date | None = None,
    filters: RecordFilters | None = None,
) -> dict[str, Any]:
    records = (filters or RecordFilters()).apply(batch.records)
    if batch.anchor is None:
        zero = AggregateMetrics()
        return {
            **empty_periods_payload(),
            "current": _metrics_payload(zero),
            "previous": _metrics_payload(zero),
            "trends": {
                name: classify_trend(0.0, 0.0).as_dict()
                for name in (*SUMMARY_METRICS, "roi")
            },
            "roi_status": roi_status(None, 0.0).as_dict(),
            "profit_status": profit_status(0.0).as_dict(),
            "records": 0,
        }

    current_interval, previous_interval = resolve_periods(batch.anchor, window, custom_start)
    current_records = filter_by_interval(records, current_interval)
    current = aggregate(current_records)
    previous = aggregate(filter_by_interval(records, previous_interval))

    trends = {
        name: classify_trend(getattr(current, name), getattr(previous, name)).as_dict()
        for name in SUMMARY_METRICS
    }
    trends["roi"] = classify_trend(current.roi or 0.0, previous.roi or 0.0).as_dict()

    return {
        "anchor_date": batch.anchor,
        "current_period": _interval_payload(current_interval),
        "previous_period": _interval_payload(previous_interval),
        "current": _metrics_payload(current),
        "previous": _metrics_payload(previous),
        "trends": trends,
        "roi_status": roi_status(current.roi, current.spend).as_dict(),
        "profit_status": profit_status(current.profit).as_dict(),
        "records": len(current_records),
    }


def breakdown(
    batch: Batch,
    dimension: str,
    window: DateWindow | str,
    custom_start: date | None = None,
    filters: RecordFilters | None = None,
) -> dict[str, Any]:
    """Per-group totals for a window compared with the previous period."""
    key_fn = KEY_FUNCTIONS.get(dimension)
    if key_fn is None:
        raise ValueError(f"Unknown breakdown dimension: {dimension!r}")
    if batch.anchor is None:
        return {**empty_periods_payload(), "dimension": dimension, "items": []}

    records = (filters or RecordFilters()).apply(batch.records)
    current_interval, previous_interval = resolve_periods(batch.anchor, window, custom_start)
    current_groups = group_by(filter_by_interval(records, current_interval), key_fn)
    previous_groups = group_by(filter_by_interval(records, previous_interval), key_fn)
    total_profit = sum(aggregate(group).profit for group in current_groups.values())

    items = []
    for key, group_records in current_groups.items():
        current = aggregate(group_records)
        previous = aggregate(previous_groups.get(key, []))
        delta = compute_delta(current.profit, previous.profit)
        items.append(
            {
                "key": format_key(key),
                "fields": dict(zip(KEY_FIELDS[dimension], key)),
                "current": _metrics_payload(current),
                "previous": _metrics_payload(previous),
                "profit_delta": delta.absolute,
                "profit_delta_pct": delta.percent,
                "profit_share": current.profit / total_profit if total_profit else None,
                "trend": classify_tiered_trend(current.profit, previous.profit).as_dict(),
                "roi_status": roi_status(current.roi, current.spend).as_dict(),
            }
        )
    items.sort(key=lambda item: item["current"]["profit"], reverse=True)
    return {
        "anchor_date": batch.anchor,
        "current_period": _interval_payload(current_interval),
        "previous_period": _interval_payload(previous_interval),
        "dimension": dimension,
        "items": items,
    }


def daily_metrics(
    batch: Batch,
    window: DateWindow | str,
    custom_start: date | None = None,
    filters: RecordFilters | None = None,
) -> dict[str, Any]:
    if batch.anchor is None:
        return {"anchor_date": None, "period": None, "series": []}
    records = (filters or RecordFilters()).apply(batch.records)
    interval = resolve_window(window, batch.anchor, custom_start)
    series = daily_series(filter_by_interval(records, interval), interval)
    return {
        "anchor_date": batch.anchor,
        "period": _interval_payload(interval),
        "series": [
            {
                "date": point.date,
                "spend": point.spend,
                "revenue": point.revenue,
                "profit": point.profit,
                "roi": point.roi,
                "status": profit_status(point.profit).as_dict(),
            }
            for point in series
        ],
    }


def window_resolution(
    batch: Batch,
    window: DateWindow | str,
    custom_start: date | None = None,
) -> dict[str, Any]:
    label = window.value if isinstance(window, DateWindow) else window
    if batch.anchor is None:
        return {"window": label, **empty_periods_payload()}
    current, previous = resolve_periods(batch.anchor, window, custom_start)
    return {
        "window": label,
        "anchor_date": batch.anchor,
        "current_period": _interval_payload(current),
        "previous_period": _interval_payload(previous),
    }


def window_records(
    batch: Batch,
    window: DateWindow | str,
    custom_start: date | None = None,
    filters: RecordFilters | None = None,
) -> tuple[DateInterval | None, list[Record]]:
    if batch.anchor is None:
        return None, []
    interval = resolve_window(window, batch.anchor, custom_start)
    records = (filters or RecordFilters()).apply(batch.records)
    return interval, filter_by_interval(records, interval)
