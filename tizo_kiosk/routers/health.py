import logging
import sqlite3

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from tizo_kiosk.core.deps import get_db, get_rate_cache
from tizo_kiosk.db.dal import Database
from tizo_kiosk.services.rates.cache_service import RateCache

router = APIRouter(prefix="/api", tags=["health"])
logger = logging.getLogger("tizo_kiosk.health")


@router.get("/health", summary="Database connectivity and rate cache status")
async def health(
    db: Database = Depends(get_db),
    cache: RateCache = Depends(get_rate_cache),
):
    try:
        info = db.ping()
    except sqlite3.Error as e:
        logger.error("database connection error: %s", e)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "status": "disconnected",
                "error": str(e),
                "message": "Database connection failed",
            },
        )
    rates = cache.status()
    return {
        "success": True,
        "status": "connected",
        "database": info["database"],
        "serverTime": info["time"],
        "ratesLoaded": rates.loaded_at is not None,
        "ratesLoadedAt": rates.loaded_at.isoformat() if rates.loaded_at else None,
        "message": "Database connection successful",
    }
