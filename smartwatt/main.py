"""FastAPI application — main entry point."""

import os
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from smartwatt.config import get_settings
from smartwatt.core.exceptions import setup_exception_handlers
from smartwatt.core.logging import configure_logging
from smartwatt.core.middleware import setup_middleware
from smartwatt.infrastructure.database import Database

# Import all models so SQLAlchemy knows about them
from smartwatt.domain.models.admin import Admin  # noqa: F401
from smartwatt.domain.models.home_device import UserHomeDevice  # noqa: F401
from smartwatt.domain.models.system_device import SystemDevice  # noqa: F401
from smartwatt.domain.models.user import User  # noqa: F401

# Import routers
from smartwatt.interfaces.api.ai import router as ai_router
from smartwatt.interfaces.api.auth import router as auth_router
from smartwatt.interfaces.api.home_devices import router as home_devices_router
from smartwatt.interfaces.api.system_devices import router as system_devices_router

settings = get_settings()

configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database on startup, dispose of it on shutdown."""
    logger.info("Starting SmartWatt API...", env=settings.ENVIRONMENT)

    database = Database(settings.DATABASE_URL)
    # Dev convenience; production schemas are managed outside the app
    database.create_all()
    app.state.database = database
    logger.info("Database tables created/verified")

    yield

    database.dispose()
    logger.info("SmartWatt API stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="SmartWatt",
        description="Household electricity budgeting API — devices, costs and recommendations",
        version="1.0.0",
        lifespan=lifespan,
    )

    setup_middleware(app)
    setup_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(system_devices_router)
    app.include_router(home_devices_router)
    app.include_router(ai_router)

    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

    @app.get("/")
    def root():
        return {"name": "SmartWatt API", "version": "1.0.0", "status": "running", "docs": "/docs"}

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app


app = create_app()
