"""HRMS — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from hrms.admin.router import router as admin_router
from hrms.assets.router import router as assets_router
from hrms.attendance.router import holidays_router
from hrms.attendance.router import router as attendance_router
from hrms.auth.router import router as auth_router
from hrms.common.exceptions import register_exception_handlers
from hrms.common.rate_limit import limiter
from hrms.config import settings
from hrms.core_hr.router import router as employees_router
from hrms.dashboard.router import router as dashboard_router
from hrms.database import engine
from hrms.documents.router import router as documents_router
from hrms.leave.router import router as leave_router
from hrms.notifications.router import router as notifications_router
from hrms.payroll.router import router as payroll_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    if engine is None:
        logger.warning("DATABASE_URL is empty; every store call will fail with 503")
    yield
    if engine is not None:
        await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="HRMS",
        description="Leave balances, leave approvals, attendance and HR records",
        version="1.0.0",
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/api/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # Rate limiting (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

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
            "database": "connected" if engine is not None else "disconnected",
        }

    # Register routers
    app.include_router(auth_router, prefix="/api/v1/auth", tags=["auth"])
    app.include_router(employees_router, prefix="/api/v1/employees", tags=["employees"])
    app.include_router(leave_router, prefix="/api/v1/leave", tags=["leave"])
    app.include_router(attendance_router, prefix="/api/v1/attendance", tags=["attendance"])
    app.include_router(holidays_router, prefix="/api/v1/holidays", tags=["holidays"])
    app.include_router(dashboard_router, prefix="/api/v1/dashboard", tags=["dashboard"])
    app.include_router(assets_router, prefix="/api/v1/assets", tags=["assets"])
    app.include_router(payroll_router, prefix="/api/v1/payroll", tags=["payroll"])
    app.include_router(documents_router, prefix="/api/v1/documents", tags=["documents"])
    app.include_router(notifications_router, prefix="/api/v1/notifications", tags=["notifications"])
    app.include_router(admin_router, prefix="/api/v1/admin", tags=["admin"])

    return app


app = create_app()
