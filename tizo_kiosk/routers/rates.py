from __future__ import annotations

from fastapi import APIRouter, Depends

from tizo_kiosk.core.deps import get_rate_cache
from tizo_kiosk.services.rates.cache_service import RateCache

"""Rates router exposing the in-memory TIZO rate cache.

Endpoints:
    - GET /api/rates          -> current snapshot + load status
    - POST /api/rates/reload  -> re-read the rate source (manual refresh)

A failed reload answers 503 through the SourceUnavailable handler; the cached
snapshot stays in service.
"""

router = APIRouter(prefix="/api/rates", tags=["rates"])


def _status(cache: RateCache) -> dict:
    state = cache.status()
    return {
        "success": True,
        "source": cache.source_name,
        "rates": [e.as_row() for e in state.entries],
        "count": len(state.entries),
        "loadedAt": state.loaded_at.isoformat() if state.loaded_at else None,
        "lastError": state.last_error,
    }


@router.get("", summary="Current TIZO rate cache snapshot")
async def get_rates(cache: RateCache = Depends(get_rate_cache)):
    return _status(cache)


@router.post("/reload", summary="Reload the TIZO rate cache from its source")
async def reload_rates(cache: RateCache = Depends(get_rate_cache)):
    cache.load()
    return _status(cache)
