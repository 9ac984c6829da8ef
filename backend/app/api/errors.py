"""Exception handlers mapping domain errors to the JSON error envelope."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.app.errors import (
    ConflictError,
    InvalidOperationError,
    NormalizationError,
    NotFoundError,
    PermissionDeniedError,
)

logger = logging.getLogger(__name__)


def _error(
    status_code: int, message: str, headers: dict[str, str] | None = None, **extra: object
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, **extra},
        headers=headers,
    )


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return _error(status.HTTP_400_BAD_REQUEST, "Validation error", errors=errors)


async def _normalization_error(request: Request, exc: NormalizationError) -> JSONResponse:
    logger.error(f"Trip generation failed: {exc}", exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Trip generation failed")


async def _invalid_operation(request: Request, exc: InvalidOperationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, str(exc) or "Invalid operation")


async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error(status.HTTP_404_NOT_FOUND, str(exc) or "Not found")


async def _permission_denied(request: Request, exc: PermissionDeniedError) -> JSONResponse:
    return _error(status.HTTP_403_FORBIDDEN, str(exc) or "Not authorized")


async def _conflict(request: Request, exc: ConflictError) -> JSONResponse:
    return _error(status.HTTP_409_CONFLICT, str(exc) or "Conflict")


async def _integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return _error(status.HTTP_409_CONFLICT, "Request conflicts with existing data")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error envelope handlers on the application."""
    app.add_exception_handler(StarletteHTTPException, _http_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(NormalizationError, _normalization_error)  # type: ignore[arg-type]
    app.add_exception_handler(InvalidOperationError, _invalid_operation)  # type: ignore[arg-type]
    app.add_exception_handler(NotFoundError, _not_found)  # type: ignore[arg-type]
    app.add_exception_handler(PermissionDeniedError, _permission_denied)  # type: ignore[arg-type]
    app.add_exception_handler(ConflictError, _conflict)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error)  # type: ignore[arg-type]
