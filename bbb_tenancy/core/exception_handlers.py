"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps credential
resolution errors to HTTP responses so request handlers can call the
resolver without translating errors themselves.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bbb_tenancy.core.config import get_settings
from bbb_tenancy.domain.exceptions import BBBTenancyException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status when applicable
_ERROR_CODE_STATUS: dict[str, int] = {
    "TENANT_NOT_FOUND": 404,
    "CREDENTIALS_NOT_FOUND": 500,
    "LOOKUP_TRANSPORT_ERROR": 502,
    "LOOKUP_FAILED": 502,
    "BROKER_AUTHENTICATION_ERROR": 502,
}


def _tenancy_exception_handler(
    request: Request, exc: BBBTenancyException
) -> JSONResponse:
    """Return JSON from BBBTenancyException.to_dict() with appropriate status code."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if status >= 500:
        logger.error("Credential resolution failed: %s (%s)", exc.message, exc.error_code)
    return JSONResponse(
        status_code=status,
        content=exc.to_dict(),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: BBBTenancyException (and
    subclasses), generic Exception.
    """
    app.add_exception_handler(BBBTenancyException, _tenancy_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
