# routers/health.py

from fastapi import APIRouter, Depends

from core.config import settings
from core.store import RecordStore, get_record_store, ping_store
from services.records import ALL_TABLES

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


# -----------------------------------------------------
# GET /health/store
# Reads every collection once
# No auth required
# -----------------------------------------------------
@router.get("/store", summary="Record store health check")
def health_store(store: RecordStore = Depends(get_record_store)):
    """
    Verifies the active backend answers for every collection.
    Returns row-count or error details per table.
    """
    return ping_store(store, ALL_TABLES)


# -----------------------------------------------------
# GET /health/app
# -----------------------------------------------------
@router.get("/app", summary="App health check")
def health_app():
    """
    Lightweight health check for uptime monitors.
    """
    return {
        "service": settings.PROJECT_NAME,
        "status": "ok",
    }
