import logging
from contextlib import contextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from birthday_api.config import settings
from birthday_api.schemas.payment import error_messages

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


class APIError(Exception):
    """Base for failures that map onto a JSON error envelope."""

    status_code = 500
    message = "Something went wrong!"

    def __init__(self, message: Optional[str] = None, errors: Optional[list[str]] = None,
                 detail: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.errors = errors
        self.detail = detail


class PaymentValidationError(APIError):
    status_code = 400
    message = "Validation error"

    def __init__(self, errors: list[str]):
        super().__init__(errors=errors)


class InvalidPaymentId(APIError):
    status_code = 400
    message = "Invalid payment ID"


class PaymentNotFound(APIError):
    status_code = 404
    message = "Payment not found"


class StoreError(APIError):
    status_code = 500


def error_body(message: str, errors: Optional[list[str]] = None, detail: Optional[str] = None) -> dict:
    body = {"success": False, "message": message}
    if errors is not None:
        body["errors"] = errors
    if detail is not None:
        body["error"] = INTERNAL_ERROR if settings.is_production else detail
    return body


@contextmanager
def store_errors(message: str):
    """Turn database failures raised inside the block into a StoreError."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("%s", message)
        raise StoreError(message, detail=str(exc)) from exc


async def api_error_handler(request: Request, exc: APIError):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, errors=exc.errors, detail=exc.detail),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content=error_body(PaymentValidationError.message, errors=error_messages(exc.errors())),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # An unknown method on a known path is just another unmatched route
    if exc.status_code in (404, 405):
        logger.info("Route not found: %s %s", request.method, request.url.path)
        return JSONResponse(status_code=404, content=error_body("Route not found"))
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_body("Something went wrong!", detail=str(exc)),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
