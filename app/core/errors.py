"""
Exception handlers
The only place where errors become HTTP responses
"""
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import Settings
from app.core.exceptions import AppError, AuthenticationError, RateLimitError
from app.schemas.common import ApiResponse, FieldErrorDetail

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    message: str,
    settings: Settings,
    errors=None,
    detail=None,
    data=None,
    headers=None
) -> JSONResponse:
    """Envelope for a failure; raw detail is dropped in production"""
    body = ApiResponse(
        success=False,
        message=message,
        data=data,
        errors=errors,
        error=None if settings.is_production else detail
    )
    return JSONResponse(status_code=status_code, content=body.to_content(), headers=headers)


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Attach every handler to app"""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        errors = [FieldErrorDetail(**e.to_dict()) for e in exc.errors] if exc.errors else None
        headers = None
        data = None

        if isinstance(exc, RateLimitError):
            headers = {"Retry-After": str(exc.retry_after)}
            data = {"retryAfter": exc.retry_after}
        elif isinstance(exc, AuthenticationError):
            headers = {"WWW-Authenticate": "Bearer"}

        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.detail or exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")

        return error_response(
            exc.status_code, exc.message, settings,
            errors=errors, detail=exc.detail, data=data, headers=headers
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Schema errors on query, path or body parameters"""
        errors = []
        for error in exc.errors():
            location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
            errors.append(FieldErrorDetail(
                field=".".join(location) or "request",
                message=error.get("msg", "Invalid value"),
                value=error.get("input")
            ))
        return error_response(400, "Validation failed", settings, errors=errors)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return error_response(
                404, "Route not found", settings,
                detail=f"The requested route {request.url.path} does not exist."
            )
        return error_response(
            exc.status_code, str(exc.detail), settings,
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions"""
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return error_response(
            500,
            "An unexpected error occurred. Please try again later.",
            settings,
            detail=str(exc)
        )
