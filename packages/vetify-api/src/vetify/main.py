"""FastAPI application factory and entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from vetify import __version__
from vetify.config import get_settings
from vetify.db.engine import dispose_engine, init_db
from vetify.db.redis import close_redis
from vetify.errors import register_exception_handlers
from vetify.routers import api_keys, health
from vetify.routers.v1 import appointments, customers, inventory, locations, pets, reports

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown."""
    # Startup
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.environment == "development" else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting Vetify public API v%s in %s mode", __version__, settings.environment)

    # Reject insecure default secrets in production
    settings.validate_production()

    if not settings.rate_limit_enabled:
        logger.warning("Rate limiting is DISABLED; API keys are not quota-limited")
    elif settings.rate_limit_fail_open:
        logger.warning("Rate limiting fails open: requests pass while Redis is unavailable")

    # Create tables (for SQLite dev mode; production uses Alembic migrations)
    if settings.environment == "development":
        await init_db()
        logger.info("Database tables created/verified")

    yield

    # Shutdown
    await close_redis()
    await dispose_engine()
    logger.info("Vetify public API shut down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    # Disable interactive docs in production to reduce attack surface
    docs_url = "/docs" if settings.environment == "development" else None
    redoc_url = "/redoc" if settings.environment == "development" else None
    openapi_url = "/openapi.json" if settings.environment == "development" else None

    app = FastAPI(
        title="Vetify Public API",
        description="API key authenticated access to clinic data",
        version=__version__,
        lifespan=lifespan,
        docs_url=docs_url,
        redoc_url=redoc_url,
        openapi_url=openapi_url,
    )

    # Bearer tokens travel in headers, never cookies
    origins = [o.strip() for o in settings.cors_origins.split(",")]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type"],
        expose_headers=[
            "X-RateLimit-Limit",
            "X-RateLimit-Remaining",
            "X-RateLimit-Reset",
            "Retry-After",
        ],
    )

    # Security headers middleware
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Cache-Control"] = "no-store"
        return response

    register_exception_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(api_keys.router)
    app.include_router(locations.router)
    app.include_router(customers.router)
    app.include_router(pets.router)
    app.include_router(appointments.router)
    app.include_router(inventory.router)
    app.include_router(reports.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "vetify.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=(settings.environment == "development"),
    )
