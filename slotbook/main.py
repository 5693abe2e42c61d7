"""
FastAPI application for the booking service

Public booking pages, customer self-service links and the owner dashboard API
"""
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from contextlib import asynccontextmanager
import logging

from slotbook.config.settings import get_settings
from slotbook.core.middleware import (
    correlation_id_middleware,
    request_logging_middleware,
    booking_error_handler
)
from slotbook.core.monitoring import health_router
from slotbook.api.v1.router import api_v1_router
from slotbook.api.middleware.rate_limit_middleware import PublicWriteRateLimitMiddleware
from slotbook.services.booking.exceptions import BookingError
from slotbook.utils.my_logging import setup_logging

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    setup_logging()
    logger.info(f"{settings.APP_NAME} starting up")

    if settings.DEBUG:
        routes = sorted(
            (route.path, ",".join(sorted(route.methods)))
            for route in app.routes if isinstance(route, APIRoute)
        )
        for path, methods in routes:
            logger.debug(f"  {methods:12} {path}")
        logger.info(f"Total routes registered: {len(routes)}")

    yield

    logger.info(f"{settings.APP_NAME} shutting down")


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title=settings.APP_NAME,
        description="Multi-tenant appointment booking with conflict-checked slots",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    if settings.PUBLIC_WRITE_RATE_LIMIT_PER_MINUTE > 0:
        app.add_middleware(
            PublicWriteRateLimitMiddleware,
            requests_per_minute=settings.PUBLIC_WRITE_RATE_LIMIT_PER_MINUTE
        )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "PUT"],
        allow_headers=["*"],
    )

    # Add custom middleware
    app.middleware("http")(request_logging_middleware)
    app.middleware("http")(correlation_id_middleware)

    app.add_exception_handler(BookingError, booking_error_handler)

    # Include routers
    app.include_router(health_router, prefix="/health", tags=["monitoring"])
    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "service": settings.APP_NAME,
            "version": "0.1.0",
            "status": "running",
            "endpoints": {
                "api": "/api/v1/",
                "health": "/health",
                "docs": "/docs" if settings.DEBUG else "disabled"
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "slotbook.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
