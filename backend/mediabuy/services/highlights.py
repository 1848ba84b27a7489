from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, Callable, Iterable

from mediabuy.services.aggregation import (
    AggregateMetrics,
    DailyPoint,
    aggregate,
    daily_series,
    format_dollar,
    format_percent,
)
from mediabuy.services.records import (
    Batch,
    Record,
    RecordFilters,
    account_key,
    buyer_network_offer_key,
    filter_by_interval,
    format_key,
    group_by,
    network_offer_key,
)
from mediabuy.services.windows import trailing_days

WEEK_DAYS = 7


class HighlightCategory(str, Enum):
    PERFORMING = "performing"
    POTENTIAL = "potential"
    DECLINING_PROFITABLE = "declining-profitable"
    DECLINING_CRITICAL = "declining-critical"
    INCONSISTENT = "inconsistent"

    @property
    def label(self) -> str:
        return CATEGORY_PRESENTATION[self][0]

    @property
    def icon(self) -> str:
        return CATEGORY_PRESENTATION[self][1]

    @property
    def title_prefix(self) -> str:
        return CATEGORY_PRESENTATION[self][2]

    @property
    def description(self) -> str:
        return CATEGORY_PRESENTATION[self][3]


CATEGORY_PRESENTATION: dict[HighlightCategory, tuple[str, str, str, str]] = {
    HighlightCategory.PERFORMING: (
        "Top Performers",
        "📈",
        "Scale Opportunity",
        "Consistently profitable with strong ROI.",
    ),
    HighlightCategory.POTENTIAL: (
        "Showing Potential",
        "💡",
        "Growing Profit",
        "Profit is trending upward with healthy ROI.",
    ),
    HighlightCategory.DECLINING_PROFITABLE: (
        "Monitor Closely",
        "📉",
        "Monitor",
        "Still profitable but showing decline in performance.",
    ),
    HighlightCategory.DECLINING_CRITICAL: (
        "Critical Attention Needed",
        "🚨",
        "Urgent Action",
        "Currently unprofitable or severe performance decline.",
    ),
    HighlightCategory.INCONSISTENT: (
        "Inconsistent Performance",
        "⚠️",
        "Variable",
        "Inconsistent daily profit performance.",
    ),
}

CATEGORY_ORDER = list(HighlightCategory)


class HighlightView(str, Enum):
    OFFER = "offer"
    BUYER = "buyer"
    ACCOUNT = "account"


VIEW_KEYS: dict[HighlightView, Callable[[Record], tuple[str, ...]]] = {
    HighlightView.OFFER: network_offer_key,
    HighlightView.BUYER: buyer_network_offer_key,
    HighlightView.ACCOUNT: account_key,
}


@dataclass(frozen=True)
class HighlightSnapshot:
    target_profit: float
    target_spend: float
    target_revenue: float
    target_roi: float
    avg_daily_profit: float
    avg_roi: float
    profit_change: float
    profit_stddev: float | None = None


@dataclass(frozen=True)
class HighlightMetric:
    label: str
    value: str
    trend: str | None = None


@dataclass(frozen=True)
class HighlightItem:
    category: HighlightCategory
    subject_key: tuple[str, ...]
    title: str
    description: str
    metrics: list[HighlightMetric]
    snapshot: HighlightSnapshot
    week_series: list[DailyPoint] = field(default_factory=list)

    @property
    def subject(self) -> str:
        return format_key(self.subject_key)


def _roi_or_zero(metrics: AggregateMetrics) -> float:
    return metrics.profit / metrics.spend * 100 if metrics.spend > 0 else 0.0


def build_snapshot(week: AggregateMetrics, target: AggregateMetrics) -> HighlightSnapshot:
    avg_daily_profit = week.profit / WEEK_DAYS
    return HighlightSnapshot(
        target_profit=target.profit,
        target_spend=target.spend,
        target_revenue=target.revenue,
        target_roi=_roi_or_zero(target),
        avg_daily_profit=avg_daily_profit,
        avg_roi=_roi_or_zero(week),
        profit_change=target.profit - avg_daily_profit,
    )


def classify_snapshot(snapshot: HighlightSnapshot) -> HighlightCategory | None:
    """Return the first category whose thresholds match, or ``None``."""
    if (
        snapshot.target_profit > 1000
        and snapshot.avg_daily_profit > 800
        and snapshot.target_roi > 30
    ):
        return HighlightCategory.PERFORMING
    if (
        snapshot.profit_change > 200
        and snapshot.target_profit > 500
        and snapshot.target_roi > 20
    ):
        return HighlightCategory.POTENTIAL
    if snapshot.target_profit > 300 and snapshot.profit_change < -200:
        return HighlightCategory.DECLINING_PROFITABLE
    if snapshot.target_profit < 0 or (
        snapshot.target_spend > 500 and snapshot.target_roi < 0
    ):
        return HighlightCategory.DECLINING_CRITICAL
    if snapshot.target_spend > 0:
        return HighlightCategory.INCONSISTENT
    return None


def profit_stddev(series: Iterable[DailyPoint], mean: float) -> float:
    profits = [point.profit for point in series]
    if not profits:
        return 0.0
    return math.sqrt(sum((profit - mean) ** 2 for profit in profits) / len(profits))


def _metrics_for(category: HighlightCategory, snapshot: HighlightSnapshot) -> list[HighlightMetric]:
    roi = HighlightMetric("ROI", format_percent(snapshot.target_roi))
    if category is HighlightCategory.PERFORMING:
        return [
            HighlightMetric("Daily Profit", format_dollar(snapshot.target_profit), "up"),
            HighlightMetric("Avg Profit", format_dollar(snapshot.avg_daily_profit)),
            roi,
        ]
    if category is HighlightCategory.POTENTIAL:
        return [
            HighlightMetric("Daily Profit", format_dollar(snapshot.target_profit), "up"),
            HighlightMetric("Profit Change", format_dollar(snapshot.profit_change)),
            roi,
        ]
    if category is HighlightCategory.DECLINING_PROFITABLE:
        return [
            HighlightMetric("Daily Profit", format_dollar(snapshot.target_profit), "down"),
            HighlightMetric("vs Avg", format_dollar(snapshot.profit_change)),
            roi,
        ]
    if category is HighlightCategory.DECLINING_CRITICAL:
        return [
            HighlightMetric("Daily Loss", format_dollar(snapshot.target_profit), "down"),
            HighlightMetric("Spend", format_dollar(snapshot.target_spend)),
            roi,
        ]
    return [
        HighlightMetric("Current Profit", format_dollar(snapshot.target_profit)),
        HighlightMetric("Avg Profit", format_dollar(snapshot.avg_daily_profit)),
        HighlightMetric("Daily Variance", f"±{format_dollar(snapshot.profit_stddev or 0.0)}"),
    ]


def highlight_group(
    key: tuple[str, ...],
    records: list[Record],
    anchor: date,
) -> HighlightItem | None:
    week_interval = trailing_days(anchor, WEEK_DAYS)
    week_records = filter_by_interval(records, week_interval)
    if not week_records:
        return None
    target_records = [record for record in week_records if record.date == anchor]

    week = aggregate(week_records)
    target = aggregate(target_records)
    week_series = daily_series(week_records, week_interval)
    snapshot = build_snapshot(week, target)

    category = classify_snapshot(snapshot)
    if category is None:
        return None
    if category is HighlightCategory.INCONSISTENT:
        snapshot = replace(
            snapshot,
            profit_stddev=profit_stddev(week_series, snapshot.avg_daily_profit),
        )

    return HighlightItem(
        category=category,
        subject_key=key,
        title=f"{category.title_prefix}: {format_key(key)}",
        description=category.description,
        metrics=_metrics_for(category, snapshot),
        snapshot=snapshot,
        week_series=week_series,
    )


def generate_highlights(
    records: Iterable[Record],
    anchor: date | None,
    key_fn: Callable[[Record], tuple[str, ...]] = buyer_network_offer_key,
) -> list[HighlightItem]:
    """Classify every group active during the week ending at ``anchor``.

    At most one item is produced per group.
    """
    if anchor is None:
        return []
    week_records = filter_by_interval(records, trailing_days(anchor, WEEK_DAYS))
    items = []
    for key, group_records in group_by(week_records, key_fn).items():
        item = highlight_group(key, group_records, anchor)
        if item is not None:
            items.append(item)
    return sort_highlights(items)


def generate_view_highlights(
    records: Iterable[Record],
    anchor: date | None,
    view: HighlightView = HighlightView.BUYER,
) -> list[HighlightItem]:
    return generate_highlights(records, anchor, VIEW_KEYS[view])


def sort_highlights(items: list[HighlightItem]) -> list[HighlightItem]:
    return sorted(
        items,
        key=lambda item: (
            CATEGORY_ORDER.index(item.category),
            -item.snapshot.target_profit,
        ),
    )


def group_by_category(items: Iterable[HighlightItem]) -> dict[HighlightCategory, list[HighlightItem]]:
    grouped: dict[HighlightCategory, list[HighlightItem]] = {
        category: [] for category in CATEGORY_ORDER
    }
    for item in items:
        grouped[item.category].append(item)
    return grouped


def category_counts(items: Iterable[HighlightItem]) -> dict[str, int]:
    return {
        category.value: len(group)
        for category, group in group_by_category(items).items()
    }


def serialize_highlight(item: HighlightItem) -> dict[str, Any]:
    return {
        "category": item.category.value,
        "category_label": item.category.label,
        "icon": item.category.icon,
        "subject_key": list(item.subject_key),
        "subject": item.subject,
        "title": item.title,
        "description": item.description,
        "metrics": [asdict(metric) for metric in item.metrics],
        "snapshot": asdict(item.snapshot),
        "week_series": [
            {
                "date": point.date,
                "profit": point.profit,
                "spend": point.spend,
                "revenue": point.revenue,
            }
            for point in item.week_series
        ],
    }


def highlights_report(
    batch: Batch,
    view: HighlightView = HighlightView.BUYER,
    filters: RecordFilters | None = None,
) -> dict[str, Any]:
    records = (filters or RecordFilters()).apply(batch.records)
    items = generate_view_highlights(records, batch.anchor, view)
    return {
        "anchor_date": batch.anchor,
        "view": view.value,
        "counts": category_counts(items),
        "items": [serialize_highlight(item) for item in items],
    }
