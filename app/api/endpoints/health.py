"""Health check endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text

from app.core.config import settings
from app.core.database import get_db
from app.core.redis import get_redis, RedisClient
from app.core.resources import registry

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {"status": "healthy", "version": settings.APP_VERSION}


@router.get("/health/ready")
async def readiness_check(
    db: AsyncSession = Depends(get_db),
    redis: RedisClient = Depends(get_redis),
):
    """
    Readiness check - verify the database (and Redis, when enabled) answer.
    Used by Kubernetes readiness probe.
    """
    checks = {"database": "unknown"}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except Exception as e:
        checks["database"] = f"unhealthy: {str(e)}"

    if settings.REDIS_ENABLED:
        try:
            checks["redis"] = "healthy" if await redis.ping() else "unhealthy: not connected"
        except Exception as e:
            checks["redis"] = f"unhealthy: {str(e)}"

    is_healthy = all(status == "healthy" for status in checks.values())

    return {
        "status": "healthy" if is_healthy else "unhealthy",
        "checks": checks,
        "resources": len(registry),
    }


@router.get("/health/live")
async def liveness_check():
    """
    Liveness check - verify application is running.
    Used by Kubernetes liveness probe.
    """
    return {"status": "alive"}
