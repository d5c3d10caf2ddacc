"""HR Records — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from hr_records.auth.dependencies import get_session
from hr_records.auth.schemas import AuthSession
from hr_records.common.cache import QueryCache
from hr_records.common.exceptions import register_exception_handlers
from hr_records.common.rate_limit import limiter
from hr_records.config import settings
from hr_records.dashboard.router import router as dashboard_router
from hr_records.database import RecordStore, create_store
from hr_records.departments.router import router as departments_router
from hr_records.employees.router import router as employees_router
from hr_records.job_history.router import jobs_router, router as job_history_router
from hr_records.layout.router import router as layout_router
from hr_records.notifications.router import router as notifications_router
from hr_records.notifications.service import Notifier

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the record store at startup (unless one was injected), close it at shutdown."""
    owns_store = app.state.store is None
    if owns_store:
        app.state.store = create_store(settings)
    logger.info("HR Records started (%s)", settings.ENVIRONMENT)
    yield
    if owns_store:
        await app.state.store.dispose()
    logger.info("HR Records stopped")


def create_app(
    store: Optional[RecordStore] = None,
    cache: Optional[QueryCache] = None,
    notifier: Optional[Notifier] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    The store, cache and notifier are process-wide; tests pass their own.
    """
    configure_logging()

    app = FastAPI(
        title="HR Records",
        description="Employees, departments and job history",
        version="1.0.0",
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/api/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.cache = cache or QueryCache(
        stale_after=settings.QUERY_STALE_SECONDS,
        max_entries=settings.QUERY_CACHE_MAX_ENTRIES,
    )
    app.state.notifier = notifier or Notifier(buffer_size=settings.NOTIFICATION_BUFFER_SIZE)

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # Rate limiting (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check (no auth)
    @app.get("/api/v1/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": "1.0.0",
            "environment": settings.ENVIRONMENT,
        }

    # Entry point: signed-in users land on the dashboard
    @app.get("/", include_in_schema=False)
    async def index(session: Optional[AuthSession] = Depends(get_session)):
        target = "/dashboard" if session is not None else settings.LOGIN_ROUTE
        return RedirectResponse(url=target, status_code=307)

    # Register routers
    app.include_router(employees_router, prefix="/api/v1/employees", tags=["employees"])
    app.include_router(departments_router, prefix="/api/v1/departments", tags=["departments"])
    app.include_router(jobs_router, prefix="/api/v1/jobs", tags=["jobs"])
    app.include_router(job_history_router, prefix="/api/v1/job-history", tags=["job-history"])
    app.include_router(dashboard_router, prefix="/api/v1/dashboard", tags=["dashboard"])
    app.include_router(notifications_router, prefix="/api/v1/notifications", tags=["notifications"])
    app.include_router(layout_router, prefix="/api/v1/navigation", tags=["layout"])

    return app


app = create_app()
