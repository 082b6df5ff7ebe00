"""Translate domain errors into HTTP responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ValidationError

from academy.exceptions import (
    AcademyError,
    ConflictError,
    EmptyCartError,
    ForbiddenError,
    GatewayUnavailableError,
    InvalidStateError,
    NotFoundError,
    PaymentNotCompletedError,
    UnsupportedStatusError,
)

logger = structlog.get_logger(__name__)

# Most specific classes first: PaymentMismatchError falls through to InvalidStateError
STATUS_CODES = (
    (NotFoundError, 404),
    (ForbiddenError, 403),
    (ConflictError, 409),
    (PaymentNotCompletedError, 409),
    (GatewayUnavailableError, 502),
    (EmptyCartError, 400),
    (UnsupportedStatusError, 400),
    (InvalidStateError, 400),
)


def status_code_for(exc: AcademyError) -> int:
    for error_class, status_code in STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return 400


async def academy_error_handler(request: Request, exc: AcademyError) -> JSONResponse:
    status_code = status_code_for(exc)
    log = logger.warning if status_code >= 500 else logger.info
    log("Request failed", path=request.url.path, kind=exc.kind, error=exc.message)
    return JSONResponse(status_code=status_code, content={"error": exc.to_dict()})


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": {"kind": "validation", "message": "Invalid input", "fields": exc.messages}},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AcademyError, academy_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
