"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Every error leaves the API
in the same envelope:

    {"success": false,
     "error": {"code": ..., "message": ..., "details": ...},
     "timestamp": ..., "path": ...}
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from jose import JWTError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from wastems.core.config import get_settings
from wastems.core.limiter import RATE_LIMIT_MESSAGE
from wastems.domain.exceptions import WasteMSException
from wastems.shared.utils import isoformat_z

logger = logging.getLogger(__name__)

_STATUS_CODE: dict[int, str] = {
    400: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    429: "RATE_LIMITED",
}

_ERROR_CODE_STATUS: dict[str, int] = {code: status for status, code in _STATUS_CODE.items()}


def error_code_for_status(status: int) -> str:
    return _STATUS_CODE.get(status, "INTERNAL_ERROR")


def error_response(
    request: Request,
    status: int,
    message: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the error envelope; the code is derived from the status."""
    return JSONResponse(
        status_code=status,
        content={
            "success": False,
            "error": {
                "code": error_code_for_status(status),
                "message": message,
                "details": details if details is not None else {},
            },
            "timestamp": isoformat_z(),
            "path": request.url.path,
        },
        headers=headers,
    )


def _wastems_exception_handler(request: Request, exc: WasteMSException) -> JSONResponse:
    """Map exc.error_code to a status; unknown codes are internal errors."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 500)
    if status == 500:
        logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    return error_response(request, status, exc.message, exc.details)


def _jwt_exception_handler(request: Request, exc: JWTError) -> JSONResponse:
    """python-jose errors (including ExpiredSignatureError) are always 401."""
    return error_response(request, 401, "Not authorized, token failed")


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # Called synchronously by SlowAPIMiddleware; must not be async.
    return error_response(
        request, 429, RATE_LIMIT_MESSAGE, {"limit": str(exc.detail)}
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 with the pydantic error list as details."""
    return error_response(
        request, 400, "Request validation failed", jsonable_encoder(exc.errors())
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return the envelope for Starlette HTTP exceptions (unmatched routes included)."""
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = f"Not found - {request.url.path}"
    else:
        message = str(exc.detail)
    return error_response(request, exc.status_code, message, headers=getattr(exc, "headers", None))


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include the exception text only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    message = str(exc) if get_settings().debug else "Internal server error"
    return error_response(request, 500, message)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: WasteMSException (and
    subclasses), JWTError, RateLimitExceeded, RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(WasteMSException, _wastems_exception_handler)
    app.add_exception_handler(JWTError, _jwt_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
