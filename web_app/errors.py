"""Translate shortener exceptions into HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from shortener.common.logging_config import get_logger
from shortener.exceptions import (
    AllocationExhaustedError,
    AuthenticationRequiredError,
    InvalidCredentialsError,
    InvalidInputError,
    LinkNotFoundError,
    ShortenerError,
    StoreError,
    UserExistsError,
)

logger = get_logger("web")

GENERIC_ERROR_MESSAGE = "Error processing the request"

# Most specific first; the first isinstance match wins
CLIENT_ERRORS = (
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (AuthenticationRequiredError, status.HTTP_401_UNAUTHORIZED),
    (LinkNotFoundError, status.HTTP_404_NOT_FOUND),
    (UserExistsError, status.HTTP_409_CONFLICT),
)


def _error_body(error: ShortenerError, detail: str) -> dict:
    return {"error": error.error_code, "detail": detail}


async def shortener_error_handler(request: Request, exc: ShortenerError) -> JSONResponse:
    for error_type, status_code in CLIENT_ERRORS:
        if isinstance(exc, error_type):
            return JSONResponse(status_code=status_code, content=_error_body(exc, str(exc)))

    # Server-side faults: details stay in the logs
    if isinstance(exc, AllocationExhaustedError):
        logger.error(f"Allocation exhausted on {request.method} {request.url.path}")
    elif isinstance(exc, StoreError):
        logger.error(
            f"Store failure on {request.method} {request.url.path}: {exc} (cause: {exc.__cause__!r})"
        )
    else:
        logger.error(f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "app:internal_error", "detail": GENERIC_ERROR_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShortenerError, shortener_error_handler)
