"""Exception hierarchy and handler for the API.

Services and routes raise subclasses of ``AppException``; the handler
registered in ``main.py`` turns them into JSON responses of the form
``{"detail": ..., "error_code": ...}``.

Exception Hierarchy:
    AppException (base, 500)
    ├── ValidationError (400)
    ├── AuthenticationError (401)
    ├── NotFoundError (404)
    ├── ConflictError (409)
    ├── CurrencyConversionError (422)
    └── ExternalAPIError (503)

``CurrencyConversionError`` is also raised by the pure conversion code. The
valuation layer catches it and falls back to stored snapshot values; it only
reaches a client when a caller asks for an explicit conversion.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppException(Exception):
    """
    Base exception class for all application errors.

    Attributes:
        status_code: HTTP status code for this error type
        detail: User-facing error message
        error_code: Machine-readable error code (optional)
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal server error"
    error_code: str | None = None

    def __init__(
        self,
        detail: str | None = None,
        *,
        error_code: str | None = None,
    ) -> None:
        self.detail = detail or self.__class__.detail
        self.error_code = error_code or self.__class__.error_code
        super().__init__(self.detail)


class ValidationError(AppException):
    """Invalid request parameters or violated business constraints."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Validation error"
    error_code = "VALIDATION_ERROR"


class AuthenticationError(AppException):
    """Missing, expired or malformed bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Authentication failed"
    error_code = "AUTHENTICATION_ERROR"


class NotFoundError(AppException):
    """Requested resource does not exist or belongs to another user."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Resource not found"
    error_code = "NOT_FOUND"


class ConflictError(AppException):
    """Duplicate entries, e.g. a second yearly record for the same year."""

    status_code = status.HTTP_409_CONFLICT
    detail = "Resource conflict"
    error_code = "CONFLICT"


class CurrencyConversionError(AppException):
    """
    Raised when an amount cannot be converted between two currencies.

    The rate table only holds direct pairs; a missing pair is never
    triangulated through a third currency.
    """

    status_code = 422
    detail = "Currency conversion failed"
    error_code = "CURRENCY_CONVERSION_ERROR"


class ExternalAPIError(AppException):
    """
    Raised when a market data provider fails.

    Used when Yahoo Finance is unreachable or returns nothing usable for
    exchange rates or quotes.
    """

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "External service unavailable"
    error_code = "EXTERNAL_API_ERROR"


async def app_exception_handler(
    request: Request,
    exc: AppException,
) -> JSONResponse:
    """
    Convert an ``AppException`` into a JSON response.

    Server errors (5xx) are logged with a stack trace, client errors with the
    message only.
    """
    context = {
        "status_code": exc.status_code,
        "error_code": exc.error_code,
        "request_path": request.url.path,
    }
    if exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__}: {exc.detail}", exc_info=True, extra=context)
    else:
        logger.warning(f"{exc.__class__.__name__}: {exc.detail}", extra=context)

    response_body: dict[str, Any] = {"detail": exc.detail}
    if exc.error_code:
        response_body["error_code"] = exc.error_code

    return JSONResponse(
        status_code=exc.status_code,
        content=response_body,
    )
