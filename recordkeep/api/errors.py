"""
Mapping from domain errors to HTTP responses.

Every error response carries the request's X-Request-ID; 500s also put it
in the body so users can quote it.
"""

from typing import Dict, Optional, Type

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from recordkeep.config import get_settings
from recordkeep.kernel.identity.exceptions import (
    AuthenticationError,
    DuplicateEmailError,
    IdentityError,
    ValidationError,
)
from recordkeep.logging_config import get_logger

logger = get_logger(__name__)

# Client-facing identity errors; anything else under IdentityError is internal
CLIENT_ERROR_STATUS: Dict[Type[IdentityError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    DuplicateEmailError: status.HTTP_400_BAD_REQUEST,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
}

# Same body for every authentication failure
AUTHENTICATION_FAILED = "Invalid credentials"


def error_response(
    request: Request,
    status_code: int,
    content: dict,
    headers: Optional[dict] = None,
) -> JSONResponse:
    headers = dict(headers or {})
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        headers["X-Request-ID"] = request_id
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            content["request_id"] = request_id
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return error_response(request, exc.status_code, {"detail": exc.detail}, exc.headers)


async def identity_error_handler(request: Request, exc: IdentityError) -> JSONResponse:
    """
    400 for malformed or taken credentials, 401 for failed authentication.

    HashingError and TokenSigningError fall through to the internal error handler.
    """
    status_code = CLIENT_ERROR_STATUS.get(type(exc))
    if status_code is None:
        return await internal_error_handler(request, exc)

    if status_code == status.HTTP_401_UNAUTHORIZED:
        return error_response(
            request,
            status_code,
            {"detail": AUTHENTICATION_FAILED},
            {"WWW-Authenticate": "Bearer"},
        )
    return error_response(request, status_code, {"detail": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        {"detail": "Validation error", "errors": errors},
    )


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled %s on %s %s", type(exc).__name__, request.method, request.url.path)
    if get_settings().debug:
        content = {"detail": str(exc), "type": type(exc).__name__}
    else:
        content = {"detail": "Internal server error"}
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(IdentityError, identity_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, internal_error_handler)
