from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mediabuy.api.deps import Store
from mediabuy.db.session import get_db
from mediabuy.schemas.health import HealthResponse
from mediabuy.services import health as health_service

router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["system"])
def health(store: Store, db: Session = Depends(get_db)) -> HealthResponse:
    database_ok = health_service.check_database(db)
    batch = store.current
    return HealthResponse(
        status="ok" if database_ok else "degraded",
        database=database_ok,
        records=len(batch),
        anchor_date=batch.anchor,
        generation=batch.generation,
    )
