"""Exception → JSON error response mapping. Every body carries the transaction ID."""

import logging
from datetime import datetime, timezone
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from rolegate.core.exceptions import ServiceError
from rolegate.core.transaction import get_transaction_id
from rolegate.schemas.errors import ErrorResponse

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


def request_transaction_id(request: Request) -> str:
    """The ID the middleware assigned to this request, else the context value."""
    return getattr(request.state, "transaction_id", None) or get_transaction_id()


def error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    body = ErrorResponse(
        timestamp=datetime.now(timezone.utc),
        status=status_code,
        error=HTTPStatus(status_code).phrase,
        message=message,
        transaction_id=request_transaction_id(request),
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Service error: %s", exc.message, exc_info=exc)
    else:
        logger.warning("Request rejected (%s): %s", exc.status_code, exc.message)
    return error_response(request, exc.status_code, exc.message)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    message = "; ".join(messages) or "Invalid request"
    logger.warning("Invalid request: %s", message)
    return error_response(request, 400, message)


def unexpected_error_response(request: Request, exc: Exception) -> JSONResponse:
    """500 body for exceptions no handler claimed; the detail is logged, never returned."""
    logger.error("Unexpected error: %s", exc, exc_info=exc)
    return error_response(request, 500, UNEXPECTED_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
