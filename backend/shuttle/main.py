"""Shuttle Booking - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shuttle.core.config import Settings, get_settings
from shuttle.core.env_validation import validate_environment
from shuttle.routers import (
    admin_router,
    bookings_router,
    payments_router,
    properties_router,
    trips_router,
)
from shuttle.services.booking_service import BookingService
from shuttle.services.payments import get_payment_provider
from shuttle.services.seed import seed_sample_data
from shuttle.services.store import StoreUnavailableError, get_store

# Hard-fails (exit 1) if required configuration is missing
validate_environment()

logger = logging.getLogger(__name__)


def build_booking_service(settings: Settings) -> BookingService:
    return BookingService(
        store=get_store(settings),
        payment_provider=get_payment_provider(settings),
        currency=settings.currency,
    )


def create_app(
    booking_service: Optional[BookingService] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the application. A prebuilt service skips store setup at startup."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        owns_service = getattr(app.state, "booking_service", None) is None
        if owns_service:
            app.state.booking_service = build_booking_service(settings)
            logger.info(f"[APP] Using {settings.store_backend.value} store")
            if settings.seed_sample_data:
                await seed_sample_data(app.state.booking_service)
        yield
        if owns_service:
            await app.state.booking_service.close()
            app.state.booking_service = None

    app = FastAPI(
        title=settings.app_name,
        description="Community shuttle trips: seat reservations, payments and passenger manifests.",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.booking_service = booking_service

    # Wildcard origins are blocked outside debug mode by env_validation
    logger.info(f"[APP] CORS configured with origins: {settings.origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
        logger.error(f"[APP] Store unavailable during {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Booking store unavailable, please retry later"},
        )

    # API v1 routers
    app.include_router(properties_router, prefix=settings.api_v1_prefix)
    app.include_router(trips_router, prefix=settings.api_v1_prefix)
    app.include_router(bookings_router, prefix=settings.api_v1_prefix)
    app.include_router(payments_router, prefix=settings.api_v1_prefix)
    app.include_router(admin_router, prefix=settings.api_v1_prefix)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": settings.app_name}

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": settings.app_name,
            "version": "1.0.0",
            "docs": "/docs" if settings.debug else "Disabled in production",
        }

    return app


app = create_app()
