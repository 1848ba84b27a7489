import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mediabuy.api.router import api_router
from mediabuy.api.routes.health import router as health_router
from mediabuy.core.config import get_settings
from mediabuy.core.logging import configure_logging
from mediabuy.db.session import SessionLocal
from mediabuy.services.batch_store import RefreshScheduler, batch_store
from mediabuy.services.ingestion import fetch_batch

settings = get_settings()

configure_logging()

logger = logging.getLogger(__name__)


def load_records_from_database():
    with SessionLocal() as db:
        return fetch_batch(db)


@asynccontextmanager
async def lifespan(_: FastAPI):
    scheduler = RefreshScheduler(
        batch_store,
        load_records_from_database,
        settings.refresh_interval_seconds,
    )
    if settings.refresh_on_startup:
        await scheduler.refresh_once()
    scheduler.start()
    logger.info("%s started", settings.app_name)
    try:
        yield
    finally:
        await scheduler.stop()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.api_prefix)
app.include_router(health_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("mediabuy.main:app", host="0.0.0.0", port=8000)
