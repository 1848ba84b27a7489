from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Annotated

from fastapi import Depends, HTTPException, Query, status

from mediabuy.services.batch_store import BatchStore, get_batch_store
from mediabuy.services.records import RecordFilters
from mediabuy.services.windows import DateWindow, parse_window

Store = Annotated[BatchStore, Depends(get_batch_store)]


@dataclass
class WindowQuery:
    window: DateWindow
    start: date | None = None


def resolve_window_query(raw_window: str, start: date | None) -> WindowQuery:
    try:
        window = parse_window(raw_window)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    if window is DateWindow.CUSTOM and start is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The custom window requires a start date.",
        )
    return WindowQuery(window=window, start=start)


def get_window_query(
    window: str = Query(DateWindow.LAST_7_DAYS.value),
    start: date | None = Query(default=None),
) -> WindowQuery:
    return resolve_window_query(window, start)


def get_record_filters(
    buyer: str | None = Query(default=None),
    network: str | None = Query(default=None),
    offer: str | None = Query(default=None),
    account: str | None = Query(default=None),
) -> RecordFilters:
    return RecordFilters(buyer=buyer, network=network, offer=offer, account=account)


Window = Annotated[WindowQuery, Depends(get_window_query)]
Filters = Annotated[RecordFilters, Depends(get_record_filters)]
