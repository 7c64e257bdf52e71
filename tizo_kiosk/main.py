import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .db.migrate import apply_migrations
from .db.seed import seed_defaults
from .core import errors
from .routers import health, offers, rates, upsell
from .services.rates.cache_service import RateCache, RateCacheRefresher
from .services.rates.conversion import TizoConverter
from .services.rates.providers import make_rate_source

logger = logging.getLogger("tizo_kiosk")


async def no_cache_middleware(request, call_next):  # type: ignore
    response = await call_next(request)
    if request.url.path.startswith("/api/"):
        response.headers.update(errors.NO_CACHE_HEADERS)
    return response


def create_app(settings_override: Settings | None = None) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    """
    settings = settings_override or get_settings()
    settings.init_post_load()
    # Initialize logging early
    init_logging(debug=settings.debug)

    # Ensure database schema (idempotent) so test-injected fresh DBs have tables
    try:
        apply_migrations(settings.db_path)  # type: ignore[arg-type]
        if settings.seed_on_startup:
            inserted = seed_defaults(settings.db_path)  # type: ignore[arg-type]
            if inserted:
                logger.info("seeded empty tables: %s", inserted)
    except Exception:
        # Failing to init DB is fatal; re-raise after logging
        logger.exception("failed to apply migrations on startup")
        raise

    rate_cache = RateCache(make_rate_source(settings))
    try:
        rate_cache.load()
    except errors.SourceUnavailable:
        # Base-unit and 1:1 tiers still work; the refresher or a manual reload
        # fills the table once the source is back.
        logger.warning("starting with an empty TIZO rate table")

    refresher = (
        RateCacheRefresher(rate_cache, settings.rates_refresh_interval_seconds)
        if settings.rates_refresh_interval_seconds > 0
        else None
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if refresher is not None:
            refresher.start()
        try:
            yield
        finally:
            if refresher is not None:
                refresher.stop()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.rate_cache = rate_cache
    app.state.converter = TizoConverter(rate_cache)
    app.state.rate_refresher = refresher

    # Middleware (request id / structured logging, no-cache API responses, CORS)
    app.middleware("http")(no_cache_middleware)
    app.middleware("http")(request_context_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(errors.InvalidAmount, errors.invalid_amount_handler)
    app.add_exception_handler(
        errors.SourceUnavailable, errors.source_unavailable_handler
    )
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(offers.router)
    app.include_router(upsell.router)
    app.include_router(rates.router)

    @app.get("/")
    async def root():
        return {"message": "TIZO Kiosk API", "version": settings.version}

    return app
