# app/core/errors.py
"""
Booking error taxonomy and the FastAPI handlers that render it.

Every category a caller has to react to differently gets its own class:
validation (fix input), not found (abort), conflict (pick another slot),
policy denied (call the shop). Storage outages surface as 503.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

logger = logging.getLogger(__name__)


class BookingError(Exception):
    """Base class for caller-visible booking failures"""

    status_code = 400
    code = "BOOKING_ERROR"

    def __init__(self, message: str, code: Optional[str] = None, **extra: Any):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "code": self.code, **self.extra}


class ValidationError(BookingError):
    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(BookingError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(BookingError):
    status_code = 409
    code = "CONFLICT"


class SlotConflictError(ConflictError):
    code = "SLOT_TAKEN"

    def __init__(self, message: str = "This time slot is no longer available", **kwargs: Any):
        super().__init__(message, **kwargs)


class AlreadyCancelledError(ConflictError):
    code = "ALREADY_CANCELLED"

    def __init__(self, message: str = "Appointment has already been cancelled", **kwargs: Any):
        super().__init__(message, **kwargs)


class PolicyDeniedError(BookingError):
    status_code = 403
    code = "POLICY_DENIED"


async def booking_error_handler(request: Request, exc: BookingError):
    # Expected outcomes under normal traffic, never logged as faults
    logger.info(
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={"correlation_id": getattr(request.state, "correlation_id", "unknown")},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info(f"VALIDATION_ERROR on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Invalid request",
            "code": "VALIDATION_ERROR",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


async def storage_unavailable_handler(request: Request, exc: OperationalError):
    logger.error(f"Storage unavailable on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=503,
        content={
            "detail": "Service temporarily unavailable, please retry",
            "code": "STORAGE_UNAVAILABLE",
            "retryable": True,
        },
        headers={"Retry-After": "1"},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach booking error rendering to the application"""
    app.add_exception_handler(BookingError, booking_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(OperationalError, storage_unavailable_handler)
