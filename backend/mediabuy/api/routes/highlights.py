from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from mediabuy.api.deps import Filters, Store
from mediabuy.schemas.highlights import HighlightsResponse
from mediabuy.services.highlights import HighlightView, highlights_report

router = APIRouter(prefix="/highlights", tags=["highlights"])


def _parse_view(raw_value: str) -> HighlightView:
    try:
        return HighlightView(raw_value.strip().lower())
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown highlight view: {raw_value!r}",
        ) from exc


@router.get("", response_model=HighlightsResponse)
def get_highlights(
    store: Store,
    filters: Filters,
    view: str = Query(HighlightView.BUYER.value),
) -> HighlightsResponse:
    resolved_view = _parse_view(view)
    data = store.compute(lambda batch: highlights_report(batch, resolved_view, filters))
    return HighlightsResponse(**data)
