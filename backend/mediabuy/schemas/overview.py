from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field

from mediabuy.schemas.metrics import TrendPublic


class OverviewRow(BaseModel):
    network: str
    offer: str
    buyer: str
    avg_daily_profit: float
    target_profit: float
    week_roas: float | None = None
    target_roas: float | None = None
    trend_pct: float
    trend: TrendPublic
    tiered_trend: TrendPublic
    daily_cap: float | None = None
    cap_status: str


class OverviewResponse(BaseModel):
    anchor_date: dt.date | None
    items: list[OverviewRow] = Field(default_factory=list)


class CapPublic(BaseModel):
    network: str
    offer: str
    daily_cap: float
    status: str


class CapsResponse(BaseModel):
    items: list[CapPublic] = Field(default_factory=list)
