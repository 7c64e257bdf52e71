"""FastAPI dependencies resolving per-app services from `app.state`.

The application factory owns the settings, rate cache and converter; routers
only ever reach them through these helpers.
"""

from fastapi import Request

from tizo_kiosk.core.config import Settings
from tizo_kiosk.db.dal import Database
from tizo_kiosk.services.rates.cache_service import RateCache
from tizo_kiosk.services.rates.conversion import TizoConverter


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Database:
    settings = get_app_settings(request)
    return Database(settings.db_path, timeout=settings.db_timeout_seconds)  # type: ignore[arg-type]


def get_rate_cache(request: Request) -> RateCache:
    return request.app.state.rate_cache


def get_converter(request: Request) -> TizoConverter:
    return request.app.state.converter
