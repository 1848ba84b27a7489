from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field


class HighlightMetricPublic(BaseModel):
    label: str
    value: str
    trend: str | None = None


class HighlightSnapshotPublic(BaseModel):
    target_profit: float
    target_spend: float
    target_revenue: float
    target_roi: float
    avg_daily_profit: float
    avg_roi: float
    profit_change: float
    profit_stddev: float | None = None


class WeekPointPublic(BaseModel):
    date: dt.date
    profit: float
    spend: float
    revenue: float


class HighlightItemPublic(BaseModel):
    category: str
    category_label: str
    icon: str
    subject_key: list[str]
    subject: str
    title: str
    description: str
    metrics: list[HighlightMetricPublic] = Field(default_factory=list)
    snapshot: HighlightSnapshotPublic
    week_series: list[WeekPointPublic] = Field(default_factory=list)


class HighlightsResponse(BaseModel):
    anchor_date: dt.date | None
    view: str
    counts: dict[str, int] = Field(default_factory=dict)
    items: list[HighlightItemPublic] = Field(default_factory=list)
