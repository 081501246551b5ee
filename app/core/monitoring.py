"""Health checks for the booking API"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from redis.exceptions import RedisError
import logging

from app.config.database import get_db
from app.config.redis import ping_redis
from app.config.settings import get_settings

logger = logging.getLogger(__name__)

health_router = APIRouter()


@health_router.get("/")
async def health_check():
    return {"status": "healthy", "service": "shop-booking-api"}


@health_router.get("/detailed")
async def detailed_health_check(db: Session = Depends(get_db)):
    """
    Bookings need the database; notifications need the broker.
    A broken database is 503, a broken broker only degrades.
    """
    checks = {"api": "healthy", "database": "unknown", "broker": "unknown"}

    try:
        db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        checks["database"] = "unhealthy"

    if get_settings().NOTIFICATIONS_ENABLED:
        try:
            await ping_redis()
            checks["broker"] = "healthy"
        except (RedisError, OSError) as e:
            logger.warning(f"Broker health check failed: {e}")
            checks["broker"] = "unhealthy"
    else:
        checks["broker"] = "disabled"

    if checks["database"] != "healthy":
        checks["overall"] = "unhealthy"
        return JSONResponse(status_code=503, content=checks)

    checks["overall"] = "healthy" if checks["broker"] in ("healthy", "disabled") else "degraded"
    return checks
