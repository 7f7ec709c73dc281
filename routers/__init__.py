# routers/__init__.py

from fastapi import APIRouter

from .auth import router as auth_router
from .transfer import router as transfer_router

from .buildings import router as buildings_router
from .units import router as units_router
from .people import router as people_router
from .tickets import router as tickets_router
from .documents import router as documents_router
from .events import router as events_router
from .communications import router as communications_router
from .dashboard import router as dashboard_router

from .health import router as health_router


# Master router, same registration order as main.create_app
api_router = APIRouter()

api_router.include_router(auth_router)
api_router.include_router(transfer_router)

api_router.include_router(buildings_router)
api_router.include_router(units_router)
api_router.include_router(people_router)
api_router.include_router(tickets_router)
api_router.include_router(documents_router)
api_router.include_router(events_router)
api_router.include_router(communications_router)
api_router.include_router(dashboard_router)

api_router.include_router(health_router)

__all__ = ["api_router"]
