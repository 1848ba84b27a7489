from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query

from mediabuy.api.deps import Store, resolve_window_query
from mediabuy.schemas.metrics import WindowResolutionResponse
from mediabuy.services.views import window_resolution

router = APIRouter(prefix="/windows", tags=["windows"])


@router.get("/{window}", response_model=WindowResolutionResponse)
def get_window(
    window: str,
    store: Store,
    start: date | None = Query(default=None),
) -> WindowResolutionResponse:
    query = resolve_window_query(window, start)
    data = window_resolution(store.current, query.window, query.start)
    return WindowResolutionResponse(**data)
