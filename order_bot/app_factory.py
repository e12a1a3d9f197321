"""
Application factory for the order bot API.

Builds the FastAPI application: middleware, rate limiting, routers and the
health check. Tests build their own app through create_app() and override
the get_db dependency.
"""

import logging

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from . import config
from .rate_limit import limiter
from .routes import (
    admin_menu_router,
    admin_orders_router,
    admin_calls_router,
    inbound_router,
    tools_router,
    webhooks_router,
)

logger = logging.getLogger(__name__)

ROUTERS = (
    webhooks_router,
    tools_router,
    inbound_router,
    admin_menu_router,
    admin_orders_router,
    admin_calls_router,
)


def create_app() -> FastAPI:
    """
    Create a FastAPI application.

    Returns:
        Configured FastAPI application
    """
    logger.info("Creating FastAPI application")

    app = FastAPI(
        title="Restaurant Phone Order API",
        description="Turns voice-agent phone calls into restaurant orders",
        version="1.0.0",
    )

    # In production, set CORS_ORIGINS to restrict allowed origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Configure rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Include routers with API version prefix
    api_v1 = APIRouter(prefix="/api/v1")
    for router in ROUTERS:
        api_v1.include_router(router)
    app.include_router(api_v1)

    # Also mount at root, where the voice vendor is configured to call
    for router in ROUTERS:
        app.include_router(router)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    logger.info("Application created successfully")

    return app
