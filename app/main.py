import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.announcements.router import router as announcements_router
from app.api.v1.auth.router import router as auth_router
from app.api.v1.classes.router import router as classes_router
from app.api.v1.dashboard.router import router as dashboard_router
from app.api.v1.fees.router import router as fees_router
from app.api.v1.maintenance.router import router as maintenance_router
from app.api.v1.portal.router import router as portal_router
from app.api.v1.results.router import router as results_router
from app.api.v1.site_content.router import router as site_content_router
from app.api.v1.students.router import router as students_router
from app.core.config import settings
from app.core.exceptions import RecordStoreError
from app.core.logging import configure_logging

logger = logging.getLogger(__name__)


async def record_store_error_handler(request: Request, exc: RecordStoreError) -> JSONResponse:
    logger.error("Record store failure on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(title="Campus Hub Backend")

    # CORS: allow frontend to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RecordStoreError, record_store_error_handler)

    # Routers
    app.include_router(auth_router)
    app.include_router(classes_router)
    app.include_router(students_router)
    app.include_router(announcements_router)
    app.include_router(fees_router)
    app.include_router(results_router)
    app.include_router(site_content_router)
    app.include_router(dashboard_router)
    app.include_router(portal_router)
    app.include_router(maintenance_router)

    return app


app = create_app()
