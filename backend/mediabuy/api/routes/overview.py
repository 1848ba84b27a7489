from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mediabuy.api.deps import Filters, Store
from mediabuy.db.session import get_db
from mediabuy.schemas.overview import OverviewResponse
from mediabuy.services.caps import cap_mapping, load_caps
from mediabuy.services.overview import overview_rows

router = APIRouter(prefix="/overview", tags=["overview"])


@router.get("", response_model=OverviewResponse)
def get_overview(
    store: Store,
    filters: Filters,
    db: Session = Depends(get_db),
) -> OverviewResponse:
    caps = cap_mapping(load_caps(db))
    batch = store.current
    rows = overview_rows(filters.apply(batch.records), batch.anchor, caps)
    return OverviewResponse(anchor_date=batch.anchor, items=rows)
