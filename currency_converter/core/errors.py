from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
import logging

from currency_converter.services.rates.errors import (
    MissingCurrencyError,
    RemoteError,
    RemoteErrorKind,
    ValidationError,
)

logger = logging.getLogger("currency_converter.errors")

GENERIC_FAILURE = "Could not convert. Please try again."

# Coarse hint shown next to the generic failure message
REMOTE_HINTS = {
    RemoteErrorKind.INVALID_API_KEY: "The exchange-rate API key is invalid or inactive.",
    RemoteErrorKind.NETWORK_ERROR: "The exchange-rate service could not be reached.",
    RemoteErrorKind.UNKNOWN_REMOTE_ERROR: "The exchange-rate service returned an error.",
}


def remote_hint(exc: RemoteError) -> str:
    return REMOTE_HINTS.get(exc.kind, REMOTE_HINTS[RemoteErrorKind.UNKNOWN_REMOTE_ERROR])


def not_found_handler(request: Request, exc):  # type: ignore
    if exc.status_code != status.HTTP_404_NOT_FOUND:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "http_error", "detail": str(exc.detail)},
        )
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "not_found",
            "detail": f"No route for {request.method} {request.url.path}",
        },
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": exc.errors(),
        },
    )


def amount_validation_handler(request: Request, exc: ValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "validation_error", "detail": str(exc)},
    )


def missing_currency_handler(request: Request, exc: MissingCurrencyError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "missing_currency", "detail": str(exc)},
    )


def remote_error_handler(request: Request, exc: RemoteError):  # type: ignore
    logger.warning("remote rate error (%s): %s", exc.kind.value, exc)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={
            "error": exc.kind.value,
            "detail": f"{GENERIC_FAILURE} {remote_hint(exc)}",
        },
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
