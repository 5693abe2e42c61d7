"""Health checks and monitoring endpoints"""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from slotbook.config.database import get_db
from slotbook.config.redis import get_redis
from slotbook.config.settings import settings

logger = logging.getLogger(__name__)

health_router = APIRouter()


@health_router.get("/")
async def health_check():
    """Basic health check"""
    return {"status": "healthy", "service": "slotbook-api"}


@health_router.get("/detailed")
async def detailed_health_check(db: Session = Depends(get_db)):
    """Database and Redis reachability; Redis only matters for the redis lock and Celery"""
    checks = {
        "api": "healthy",
        "database": "unknown",
        "redis": "unknown",
        "booking_lock_backend": settings.BOOKING_LOCK_BACKEND,
        "overall": "unknown"
    }

    try:
        db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        checks["database"] = f"unhealthy: {str(e)}"

    try:
        redis_client = await get_redis()
        await redis_client.ping()
        checks["redis"] = "healthy"
        await redis_client.aclose()
    except Exception as e:
        logger.warning(f"Redis health check failed: {e}")
        checks["redis"] = f"unhealthy: {str(e)}"

    statuses = [checks["api"], checks["database"], checks["redis"]]
    checks["overall"] = "healthy" if all(s == "healthy" for s in statuses) else "degraded"

    return checks
