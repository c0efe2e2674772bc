"""
Main FastAPI application.

Every model registered with ``api_resource`` gets list, create, show,
update, delete, schema and columns routes under ``/api/v1/<resource>``.
"""
import structlog
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from app import models  # noqa: F401  registers resources
from app.api.endpoints import auth, health, menu
from app.api.endpoints.resources import register_resource_routes
from app.core.config import settings
from app.core.database import close_db, init_db
from app.core.errors import setup_error_handlers
from app.core.logging import log_requests, setup_logging
from app.core.metrics import setup_metrics
from app.core.redis import redis_client
from app.core.resources import registry

setup_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and connect Redis on startup; release both on shutdown."""
    logger.info("application_starting", environment=settings.ENVIRONMENT)

    try:
        await init_db()
        logger.info("database_initialized")

        if settings.REDIS_ENABLED:
            await redis_client.connect()
            logger.info("redis_connected")

        yield

    finally:
        logger.info("application_shutting_down")
        await redis_client.disconnect()
        await close_db()
        logger.info("cleanup_completed")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Auto-generated REST resources with a uniform response envelope",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.middleware("http")(log_requests)

setup_error_handlers(app)
setup_metrics(app)

app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, prefix=f"{settings.API_V1_PREFIX}/auth", tags=["Authentication"])
app.include_router(menu.router, prefix=f"{settings.API_V1_PREFIX}/menu", tags=["Menu"])
register_resource_routes(app)
logger.info("resources_registered", resources=[resource.path for resource in registry.all()])


@app.get("/")
async def root():
    """Service name, version and the mounted resources."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "resources": [resource.path for resource in registry.all()],
        "docs": "/docs" if settings.DEBUG else "disabled",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
