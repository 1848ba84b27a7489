from fastapi import APIRouter, Query

from mediabuy.schemas.metrics import TrendComparisonResponse
from mediabuy.services.trends import (
    classify_tiered_trend,
    classify_trend,
    compute_delta,
    percentage_trend,
)

router = APIRouter(prefix="/trends", tags=["trends"])


@router.get("", response_model=TrendComparisonResponse)
def compare_values(
    current: float = Query(...),
    previous: float = Query(...),
) -> TrendComparisonResponse:
    delta = compute_delta(current, previous)
    return TrendComparisonResponse(
        current=current,
        previous=previous,
        delta=delta.absolute,
        delta_pct=delta.percent,
        coarse=classify_trend(current, previous).as_dict(),
        tiered=classify_tiered_trend(current, previous).as_dict(),
        percentage=percentage_trend(current, previous).as_dict(),
    )
