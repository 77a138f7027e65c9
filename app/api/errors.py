"""Rendering of patient service errors into HTTP responses."""

from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.services.errors import (
    ErrorKind,
    InvalidDateFormatError,
    PatientServiceError,
    ValidationFailedError,
)
from app.utils.logging import get_logger

logger = get_logger(__name__)

ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION_FAILED: 400,
    ErrorKind.INVALID_DATE_FORMAT: 400,
    ErrorKind.EMAIL_ALREADY_EXISTS: 409,
    ErrorKind.PATIENT_NOT_FOUND: 404,
    ErrorKind.STORE_UNAVAILABLE: 503,
}


def render_error(error: PatientServiceError) -> tuple[int, dict[str, Any]]:
    """Choose the status code and body for a domain error.

    Field-level failures render as a field -> message mapping, everything
    else as a single ``message`` key.
    """
    status_code = ERROR_STATUS[error.kind]

    if error.kind == ErrorKind.VALIDATION_FAILED:
        return status_code, dict(cast(ValidationFailedError, error).errors)

    if error.kind == ErrorKind.INVALID_DATE_FORMAT:
        date_error = cast(InvalidDateFormatError, error)
        return status_code, {date_error.field: date_error.message}

    return status_code, {"message": error.message}


def register_error_handlers(app: FastAPI) -> None:
    """Attach the domain error handler to the given FastAPI app."""

    @app.exception_handler(PatientServiceError)
    async def patient_service_error_handler(request: Request, exc: PatientServiceError) -> JSONResponse:
        status_code, body = render_error(exc)
        if status_code >= 500:
            logger.error(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
        else:
            logger.info(f"{exc.kind} on {request.method} {request.url.path}")
        return JSONResponse(status_code=status_code, content=body)
