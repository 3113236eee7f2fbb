"""Exception handlers turning every failure into {"type", "message"} JSON.

Domain code raises AppException subclasses. Database errors that escape a
router (group and program writes commit directly) are mapped here too, so
clients never see a driver message.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from academy.core.exceptions import AppException, ConflictError, StoreError

logger = logging.getLogger("academy.exception")


def _error_response(exc: AppException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"type": exc.error_type, "message": exc.message},
    )


def _request_extra(request: Request, exc: AppException) -> dict:
    return {
        "method": request.method,
        "path": request.url.path,
        "status_code": exc.status_code,
        "error_type": exc.error_type,
    }


def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """4xx are expected traffic (INFO); 5xx are ours (ERROR)."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "AppException: %s - %s",
        exc.error_type,
        exc.message,
        extra=_request_extra(request, exc),
    )
    return _error_response(exc)


def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Unique/foreign key violations become 409; anything else is a store error."""
    if isinstance(exc, IntegrityError):
        error: AppException = ConflictError("Write conflicts with existing data")
        logger.info(
            "Integrity error: %s", exc.orig, extra=_request_extra(request, error)
        )
    else:
        error = StoreError()
        logger.error(
            "Database error on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
            extra=_request_extra(request, error),
        )
    return _error_response(error)


def http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Framework-raised errors: unknown routes, wrong methods."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"type": "http_error", "message": str(exc.detail)},
    )


def validation_exception_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Join every field error into one message, e.g. "name: ...; email: ..."."""
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body")
        messages.append(f"{field}: {error['msg']}" if field else error["msg"])

    return JSONResponse(
        status_code=422,
        content={"type": "validation_error", "message": "; ".join(messages)},
    )


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception: %s %s - %s",
        request.method,
        request.url.path,
        exc,
        extra={"method": request.method, "path": request.url.path, "status_code": 500},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"type": "internal_error", "message": "An unexpected error occurred"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
