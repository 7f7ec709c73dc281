import os
import sys
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Ensure local imports resolve
sys.path.append(os.path.dirname(__file__))

# Core
from core.config import settings
from core.config_validator import validate_config_on_startup
from core.errors import KondoError, extract_error_message
from core.logging_config import logger
from core.store import reset_record_store

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers.auth import router as auth_router
from routers.transfer import router as transfer_router

from routers.buildings import router as buildings_router
from routers.units import router as units_router
from routers.people import router as people_router
from routers.tickets import router as tickets_router
from routers.documents import router as documents_router
from routers.events import router as events_router
from routers.communications import router as communications_router
from routers.dashboard import router as dashboard_router

from routers.health import router as health_router


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Kondo Manager API: condominium administration backend",
    )

    # -------------------------------------------------
    # CORS
    # -------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------
    # Startup / shutdown
    # -------------------------------------------------
    @app.on_event("startup")
    async def on_startup():
        logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENV})")
        validate_config_on_startup()
        for route in app.routes:
            methods = ",".join(sorted(getattr(route, "methods", None) or []))
            logger.debug(f"Route {methods:10s} {getattr(route, 'path', route)}")

    @app.on_event("shutdown")
    async def on_shutdown():
        reset_record_store()

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(KondoError)
    async def handle_kondo(request: Request, exc: KondoError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} at {request.url}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": extract_error_message(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403, 500):
            logger.warning(
                f"HTTP {exc.status_code} at {request.url}: {exc.detail}"
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # -------------------------------------------------
    # Register Routers
    # -------------------------------------------------

    # Auth
    app.include_router(auth_router)

    # CSV export / import (before the collection routers)
    app.include_router(transfer_router)

    # Collections
    app.include_router(buildings_router)
    app.include_router(units_router)
    app.include_router(people_router)
    app.include_router(tickets_router)
    app.include_router(documents_router)
    app.include_router(events_router)
    app.include_router(communications_router)
    app.include_router(dashboard_router)

    # Health
    app.include_router(health_router)

    return app


# Create the global FastAPI instance
app = create_app()
