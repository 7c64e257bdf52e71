from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
import logging

logger = logging.getLogger("tizo_kiosk.errors")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class KioskError(Exception):
    """Base class for domain errors raised by the kiosk services."""


class InvalidAmount(KioskError, ValueError):
    """Top-up amount is negative or not a whole number of Rb."""


class SourceUnavailable(KioskError, RuntimeError):
    """The TIZO rate source could not be reached or returned unusable rows."""


def http_error_handler(request: Request, exc):  # type: ignore
    code = getattr(exc, "status_code", status.HTTP_404_NOT_FOUND)
    if code == status.HTTP_404_NOT_FOUND and getattr(exc, "detail", None) == "Not Found":
        detail = f"No route for {request.method} {request.url.path}"
    else:
        detail = getattr(exc, "detail", None)
    return JSONResponse(
        status_code=code,
        content={"success": False, "error": detail},
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "error": "validation_error",
            "detail": exc.errors(),
        },
    )


def invalid_amount_handler(request: Request, exc: InvalidAmount):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "error": "invalid_amount",
            "detail": str(exc),
        },
    )


def source_unavailable_handler(request: Request, exc: SourceUnavailable):  # type: ignore
    logger.warning("rate source unavailable: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "success": False,
            "error": str(exc),
        },
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    # Runs outside the app middleware stack, so no_cache_middleware never sees it
    headers = NO_CACHE_HEADERS if request.url.path.startswith("/api/") else None
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "An unexpected error occurred.",
        },
        headers=headers,
    )
