from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class RecordPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    buyer: str
    network: str
    offer: str
    account: str
    spend: float
    revenue: float
    profit: float


class RecordsResponse(BaseModel):
    anchor_date: dt.date | None
    total: int
    items: list[RecordPublic] = Field(default_factory=list)


class IngestionReportPublic(BaseModel):
    filename: str
    total_rows: int
    accepted_rows: int
    dropped_rows: int
    dropped: dict[str, int] = Field(default_factory=dict)
    generation: int
    anchor_date: dt.date | None


class RefreshResponse(BaseModel):
    generation: int
    records: int
    anchor_date: dt.date | None
