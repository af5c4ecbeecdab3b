"""Map raised errors to JSON responses.

Only operator and caller mistakes reach these handlers. A purge that the
Fast Purge API rejects is not an exception: it comes back as a
PurgeResponse body with success=false and a 200 status.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from edgepurge.core.config import get_settings
from edgepurge.domain.exceptions import (
    ConfigurationException,
    EdgePurgeException,
    ResourceNotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)

# A misconfigured signer or hostname is the operator's problem, not the caller's.
_STATUS_BY_TYPE: tuple[tuple[type[EdgePurgeException], int], ...] = (
    (ResourceNotFoundException, 404),
    (ValidationException, 400),
    (ConfigurationException, 500),
)


def _error_body(error: str, message: Any, details: Any = None) -> dict[str, Any]:
    body = {"error": error, "message": message}
    if details is not None:
        body["details"] = details
    return body


def _status_for(exc: EdgePurgeException) -> int:
    for exc_type, status in _STATUS_BY_TYPE:
        if isinstance(exc, exc_type):
            return status
    return 400


def _edgepurge_exception_handler(request: Request, exc: EdgePurgeException) -> JSONResponse:
    status = _status_for(exc)
    if status >= 500:
        logger.error("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status, content=exc.to_dict())


def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed event or purge payloads."""
    return JSONResponse(
        status_code=422,
        content=_error_body(
            "VALIDATION_ERROR", "Request validation failed", jsonable_encoder(exc.errors())
        ),
    )


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=_error_body("HTTP_ERROR", exc.detail))


def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(status_code=500, content=_error_body("INTERNAL_ERROR", message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(EdgePurgeException, _edgepurge_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
