from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from mediabuy.api.deps import Filters, Store, Window
from mediabuy.schemas.metrics import (
    BreakdownResponse,
    DailyMetricsResponse,
    WindowSummaryResponse,
)
from mediabuy.services.views import breakdown, daily_metrics, window_summary

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get("/summary", response_model=WindowSummaryResponse)
def get_summary(store: Store, window: Window, filters: Filters) -> WindowSummaryResponse:
    data = store.compute(
        lambda batch: window_summary(batch, window.window, window.start, filters)
    )
    return WindowSummaryResponse(**data)


@router.get("/breakdown", response_model=BreakdownResponse)
def get_breakdown(
    store: Store,
    window: Window,
    filters: Filters,
    dimension: str = Query("buyer"),
) -> BreakdownResponse:
    try:
        data = store.compute(
            lambda batch: breakdown(batch, dimension, window.window, window.start, filters)
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return BreakdownResponse(**data)


@router.get("/daily", response_model=DailyMetricsResponse)
def get_daily(store: Store, window: Window, filters: Filters) -> DailyMetricsResponse:
    data = store.compute(
        lambda batch: daily_metrics(batch, window.window, window.start, filters)
    )
    return DailyMetricsResponse(**data)
