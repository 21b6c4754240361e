"""Exceptions raised by the request handlers and the handlers that render them."""

import logging

import pydantic
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ProductApiError(Exception):
    """Base error carrying the HTTP status and the client-facing message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.message
        self.status_code = status_code or self.status_code
        super().__init__(self.message)


class AuthError(ProductApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class BadRequestError(ProductApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Bad Request: Missing required fields"


class UploadFailedError(ProductApiError):
    """One or more attachments could not be stored."""
    message = "Error adding data"


class PersistenceError(ProductApiError):
    """The record store did not return a record."""
    message = "Something went wrong while adding data"


class NotFoundError(ProductApiError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "No Data Found"


class PayloadTooLargeError(ProductApiError):
    # Content Too Large; the starlette constant name differs across releases
    status_code = 413
    message = "Payload Too Large"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, "success": False})


async def handle_product_api_errors(request: Request, exc: ProductApiError) -> JSONResponse:
    """Render a `ProductApiError` as `{message, success: false}`."""
    return error_response(exc.status_code, exc.message)


async def handle_request_validation_errors(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed requests are reported as a 400 without echoing the input back."""
    logger.warning(f"Request validation failed for {request.url.path}: {exc.errors()}")
    return error_response(status.HTTP_400_BAD_REQUEST, BadRequestError.message)


async def handle_pydantic_validation_errors(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    logger.error(f"Validation error in {request.url.path}: {exc}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, ProductApiError.message)


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception as err:  # pylint: disable=broad-except
        logger.exception(err)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, ProductApiError.message)
