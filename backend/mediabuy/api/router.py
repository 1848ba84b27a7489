from fastapi import APIRouter

from mediabuy.api.routes.caps import router as caps_router
from mediabuy.api.routes.highlights import router as highlights_router
from mediabuy.api.routes.metrics import router as metrics_router
from mediabuy.api.routes.overview import router as overview_router
from mediabuy.api.routes.records import router as records_router
from mediabuy.api.routes.trends import router as trends_router
from mediabuy.api.routes.windows import router as windows_router

api_router = APIRouter()

api_router.include_router(records_router)
api_router.include_router(metrics_router)
api_router.include_router(windows_router)
api_router.include_router(trends_router)
api_router.include_router(highlights_router)
api_router.include_router(overview_router)
api_router.include_router(caps_router)
