from fastapi import APIRouter, Depends
from sqlalchemy import text
import logging

from app.api.dependencies import get_cache
from app.database import engine
from app.utils.cache import ReadCache
from app.utils.exchanges import exchange_recorder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "/",
    summary="Health check",
    description="Basic health check endpoint."
)
def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if all services (database, cache) are ready."
)
def readiness_check(cache: ReadCache = Depends(get_cache)):
    """
    Readiness check for all dependencies.

    Returns status of:
    - Database connection
    - Cache backend
    """
    checks = {
        "database": False,
        "cache": False
    }

    # Check database
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            checks["database"] = True
    except Exception as e:
        logger.warning(f"Database readiness check failed: {e}")
        checks["database_error"] = str(e)

    # Check cache
    checks["cache"] = cache.ping()

    all_healthy = all([checks["database"], checks["cache"]])

    return {
        "status": "ready" if all_healthy else "not_ready",
        "checks": checks
    }


@router.get(
    "/cache/stats",
    summary="Cache statistics",
    description="Get read cache statistics."
)
def cache_stats(cache: ReadCache = Depends(get_cache)):
    """Get cache statistics."""
    try:
        return cache.stats()
    except Exception as e:
        logger.warning(f"Cache statistics unavailable: {e}")
        return {"error": str(e)}


@router.get(
    "/exchanges",
    summary="Recent HTTP exchanges",
    description="List the most recent requests handled by the service, newest first."
)
def http_exchanges():
    """Get recorded HTTP exchanges."""
    exchanges = exchange_recorder.snapshot()
    return {"count": len(exchanges), "exchanges": exchanges}
