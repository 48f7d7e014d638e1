"""
Centralized error handlers for FastAPI.

Maps the model view error taxonomy to HTTP responses. Every error is
logged before its response is produced, and every response carries
exactly one body of the shape {"message": <string>}.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from modelview.domain.errors import (
    ModelViewError,
    PrimaryKeyNotFoundError,
    StorageError,
    ValidationError,
)
from modelview.shared.security.headers import SECURE_HEADERS

logger = logging.getLogger(__name__)

HTTP_404 = 404
HTTP_500 = 500

NOT_FOUND_MESSAGE = "nothing to see here"
INTERNAL_MESSAGE = "internal server error"


def _error_response(status_code: int, message: str) -> JSONResponse:
    """Build a consistent JSON error response."""
    return JSONResponse(status_code=status_code, content={"message": message})


def _describe_request_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


def register_error_handlers(app: FastAPI, validation_status: int = HTTP_500) -> None:
    """Register all error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
        validation_status: Status code for body and identifier decode failures.
    """

    @app.exception_handler(PrimaryKeyNotFoundError)
    async def handle_primary_key_not_found(
        request: Request, exc: PrimaryKeyNotFoundError
    ) -> JSONResponse:
        """Handle lookups of identifiers that match no row."""
        logger.warning("error happened on %s %s: %s", request.method, request.url.path, exc.message)
        return _error_response(HTTP_404, exc.message)

    @app.exception_handler(ValidationError)
    async def handle_validation(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Handle body and primary key decode failures."""
        logger.error("error happened on %s %s: %s", request.method, request.url.path, exc.message)
        return _error_response(validation_status, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle path, query and body values FastAPI could not decode."""
        message = f"invalid request: {_describe_request_errors(exc)}"
        logger.error("error happened on %s %s: %s", request.method, request.url.path, message)
        return _error_response(validation_status, message)

    @app.exception_handler(StorageError)
    async def handle_storage(
        request: Request, exc: StorageError
    ) -> JSONResponse:
        """Handle storage failures, including pool exhaustion."""
        logger.error(
            "error happened on %s %s: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc.source,
        )
        return _error_response(HTTP_500, exc.message)

    @app.exception_handler(ModelViewError)
    async def handle_model_view(
        request: Request, exc: ModelViewError
    ) -> JSONResponse:
        """Catch-all for uncategorized model view errors."""
        logger.error("error happened on %s %s: %s", request.method, request.url.path, exc.message)
        return _error_response(HTTP_500, INTERNAL_MESSAGE)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle routing errors (unknown paths, unsupported methods)."""
        message = NOT_FOUND_MESSAGE if exc.status_code == HTTP_404 else str(exc.detail)
        logger.warning("error happened on %s %s: %s", request.method, request.url.path, message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals.

        Runs outside the security headers middleware, so the headers are
        set here.
        """
        logger.exception("Unexpected error on %s %s: %s", request.method, request.url.path, type(exc).__name__)
        response = _error_response(HTTP_500, INTERNAL_MESSAGE)
        response.headers.update(SECURE_HEADERS)
        return response
