import datetime as dt

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    database: bool
    records: int
    anchor_date: dt.date | None = None
    generation: int
