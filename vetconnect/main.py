import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import HTTPException as FastAPIHTTPException
from fastapi.staticfiles import StaticFiles

from vetconnect.cache.cache_service import redis_cache
from vetconnect.core.logger import setup_logging
from vetconnect.middleware.cors import configure_cors
from vetconnect.middleware.logging import RequestLoggerMiddleware
from vetconnect.middleware import error_handler

# Routers
from vetconnect.routers import clinic_wizard as clinic_wizard_router
from vetconnect.routers import clinics as clinics_router
from vetconnect.routers import geocoding as geocoding_router
from vetconnect.routers import settings as settings_router
from vetconnect.routers import health as health_router
from vetconnect.services.geocoding_service import close_geocoding_service

UPLOADS_DIR = Path("uploads")

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    yield
    logger.info("Application shutting down...")
    await close_geocoding_service()
    await redis_cache.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    setup_logging()
    description = (
        "VetConnect Backend API.\n\n"
        "Clinic owners register and edit clinics through a four-step wizard; "
        "records are kept locally and mirrored to the remote document store."
    )

    openapi_tags = [
        {"name": "clinic-wizard", "description": "Multi-step clinic registration and editing."},
        {"name": "clinics", "description": "The signed-in owner's saved clinics and active clinic."},
        {"name": "geocoding", "description": "Address and coordinate lookups for the map picker."},
        {"name": "settings", "description": "Notification and privacy preferences."},
        {"name": "health", "description": "Health checks and service status endpoints."},
    ]

    app = FastAPI(
        title="VetConnect Backend API",
        version="0.1.0",
        description=description,
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    # Middleware
    configure_cors(app)
    app.add_middleware(RequestLoggerMiddleware)

    # Exception handlers
    app.add_exception_handler(FastAPIHTTPException, error_handler.http_exception_handler)
    app.add_exception_handler(Exception, error_handler.unhandled_exception_handler)

    # Locally stored clinic photos
    UPLOADS_DIR.mkdir(exist_ok=True)
    app.mount("/static", StaticFiles(directory=str(UPLOADS_DIR)), name="static")

    # Include routers
    app.include_router(health_router.router)
    app.include_router(clinic_wizard_router.router)
    app.include_router(clinics_router.router)
    app.include_router(geocoding_router.router)
    app.include_router(settings_router.router)

    return app


app = create_app()
