"""Error Handlers: global exception handlers for the KACLS API.

Invariants:
    - KaclsError → flat protocol JSON ({"error": ...}) with its http_status
    - Exception (catch-all) → 500 {"error": "internal_error"}, never a framework error page
    - 4xx logged at WARNING, 5xx at ERROR, always with the error code

Design Decisions:
    - Two-layer handler: domain (KaclsError), catch-all (Exception)
    - No RequestValidationError layer: routes declare no pydantic body models
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from kacls.core.errors import KaclsError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_kacls_error_handler(app)
    _register_generic_error_handler(app)


def _register_kacls_error_handler(app: FastAPI) -> None:
    """Register KACLS domain/provider error handler."""

    @app.exception_handler(KaclsError)
    async def kacls_error_handler(request: Request, exc: KaclsError):
        level = logging.WARNING if exc.http_status < 500 else logging.ERROR
        logger.log(
            level,
            f"KaclsError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "method": request.method,
                "status_code": exc.http_status,
                "operation": exc.context.operation,
                "field_path": exc.context.field_path,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        return internal_error_response(request, exc)


def internal_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log an unhandled exception and build the generic 500 body."""
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "internal_error"},
    )
