# routers/dashboard.py

from fastapi import APIRouter, Depends

from core.errors import KondoError, handle_store_error
from core.permission_helpers import requires_view
from core.store import RecordStore, get_record_store
from models.enums import View
from services.dashboard import DashboardStats, build_dashboard


router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


@router.get(
    "",
    response_model=DashboardStats,
    summary="Staff dashboard",
    description="Building count, open vs resolved tickets and the five latest tickets.",
    dependencies=[Depends(requires_view(View.dashboard))],
)
def get_dashboard(store: RecordStore = Depends(get_record_store)):
    try:
        return build_dashboard(store)
    except KondoError as e:
        raise handle_store_error(e, "Failed to build dashboard")
