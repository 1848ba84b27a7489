from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field


class PeriodPublic(BaseModel):
    from_date: dt.date = Field(alias="from")
    to_date: dt.date = Field(alias="to")
    days: int


class MetricsPublic(BaseModel):
    spend: float
    revenue: float
    profit: float
    roi: float | None = None
    roas: float | None = None
    roi_display: str
    roas_display: str


class TrendPublic(BaseModel):
    direction: Literal["positive", "negative", "neutral"]
    label: str
    icon: str
    percent_change: float | None = None


class StatusBadgePublic(BaseModel):
    icon: str
    label: str


class WindowSummaryResponse(BaseModel):
    anchor_date: dt.date | None
    current_period: PeriodPublic | None
    previous_period: PeriodPublic | None
    current: MetricsPublic
    previous: MetricsPublic
    trends: dict[str, TrendPublic]
    roi_status: StatusBadgePublic
    profit_status: StatusBadgePublic
    records: int


class BreakdownItem(BaseModel):
    key: str
    fields: dict[str, str]
    current: MetricsPublic
    previous: MetricsPublic
    profit_delta: float
    profit_delta_pct: float | None = None
    profit_share: float | None = None
    trend: TrendPublic
    roi_status: StatusBadgePublic


class BreakdownResponse(BaseModel):
    anchor_date: dt.date | None
    current_period: PeriodPublic | None
    previous_period: PeriodPublic | None
    dimension: str
    items: list[BreakdownItem] = Field(default_factory=list)


class DailyMetricsPoint(BaseModel):
    date: dt.date
    spend: float
    revenue: float
    profit: float
    roi: float | None = None
    status: StatusBadgePublic


class DailyMetricsResponse(BaseModel):
    anchor_date: dt.date | None
    period: PeriodPublic | None
    series: list[DailyMetricsPoint] = Field(default_factory=list)


class WindowResolutionResponse(BaseModel):
    window: str
    anchor_date: dt.date | None
    current_period: PeriodPublic | None
    previous_period: PeriodPublic | None


class TrendComparisonResponse(BaseModel):
    current: float
    previous: float
    delta: float
    delta_pct: float | None = None
    coarse: TrendPublic
    tiered: TrendPublic
    percentage: TrendPublic
