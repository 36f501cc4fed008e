"""
Global error handling for the FastAPI application.
Domain errors are mapped to HTTP statuses by exception handlers; anything
else is caught by the middleware and rendered as a 500.
"""

import json
import logging
import traceback
from typing import Any, Dict, Optional, Type

from fastapi import FastAPI, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from crudhub.application.dto.base_dto import ErrorResponseDTO
from crudhub.domain.models.base import (
    DomainException,
    ValidationError,
    TransitionError,
    ReferentialGuardError,
    EntityNotFoundError,
    DuplicateEntityError,
    ConcurrencyConflictError
)

logger = logging.getLogger(__name__)


DOMAIN_ERROR_STATUS: Dict[Type[DomainException], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    EntityNotFoundError: status.HTTP_404_NOT_FOUND,
    TransitionError: status.HTTP_409_CONFLICT,
    ReferentialGuardError: status.HTTP_409_CONFLICT,
    DuplicateEntityError: status.HTTP_409_CONFLICT,
    ConcurrencyConflictError: status.HTTP_409_CONFLICT,
}

DOMAIN_ERROR_TITLE: Dict[Type[DomainException], str] = {
    ValidationError: "Validation Error",
    EntityNotFoundError: "Not Found",
    TransitionError: "Invalid Status Transition",
    ReferentialGuardError: "Delete Blocked",
    DuplicateEntityError: "Conflict",
    ConcurrencyConflictError: "Concurrent Modification",
}


def error_body(
    error: str,
    message: str,
    code: str,
    status_code: int,
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Build the error response body shared by every handler."""
    return ErrorResponseDTO(
        error=error,
        message=message,
        code=code,
        status_code=status_code,
        details=details or {}
    ).model_dump()


def status_for(exc: DomainException) -> int:
    """HTTP status for a domain error."""
    for error_type, status_code in DOMAIN_ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def title_for(exc: DomainException) -> str:
    for error_type, title in DOMAIN_ERROR_TITLE.items():
        if isinstance(exc, error_type):
            return title
    return "Bad Request"


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Render a domain error."""
    status_code = status_for(exc)
    log = logger.warning if isinstance(exc, ConcurrencyConflictError) else logger.info
    log(
        "%s on %s %s: %s",
        exc.code, request.method, request.url.path, exc.message,
        extra={"error_code": exc.code, "details": exc.details}
    )
    return JSONResponse(
        status_code=status_code,
        content=error_body(title_for(exc), exc.message, exc.code, status_code, exc.details)
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed request input as a validation error."""
    errors = jsonable_encoder(exc.errors())
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = f"{field}: {first.get('msg')}" if field else (first.get("msg") or "Invalid request")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            "Validation Error",
            message,
            "VALIDATION_ERROR",
            status.HTTP_400_BAD_REQUEST,
            {"errors": errors}
        )
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors, unknown paths included, in the same shape."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = f"The path {request.url.path} was not found"
        code = "NOT_FOUND"
    else:
        message = str(exc.detail)
        code = "HTTP_ERROR"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body("HTTP Error", message, code, exc.status_code, {"path": request.url.path}),
        headers=getattr(exc, "headers", None)
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register every exception handler on the application."""
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle all uncaught exceptions and format error responses.
    """

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next):
        """
        Process the request and handle any exceptions.
        """
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            return await self.handle_exception(request, exc)

    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        """
        Handle different types of exceptions and return appropriate responses.
        """
        # Log the full exception with traceback
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                "request_path": request.url.path,
                "request_method": request.method,
                "client_host": request.client.host if request.client else None
            }
        )

        error_response = self.format_error_response(exc)

        if self.debug:
            error_response["debug"] = {
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc().split("\n")
            }

        return JSONResponse(
            status_code=error_response["status_code"],
            content=error_response
        )

    def format_error_response(self, exc: Exception) -> Dict[str, Any]:
        """
        Format exception into a consistent error response structure.
        """
        if isinstance(exc, json.JSONDecodeError):
            return error_body(
                "Invalid JSON",
                "The request body contains invalid JSON",
                "INVALID_JSON",
                status.HTTP_400_BAD_REQUEST
            )
        if isinstance(exc, TimeoutError):
            return error_body(
                "Request Timeout",
                "The request took too long to process",
                "TIMEOUT",
                status.HTTP_408_REQUEST_TIMEOUT
            )
        return error_body(
            "Internal Server Error",
            "An unexpected error occurred",
            "INTERNAL_ERROR",
            status.HTTP_500_INTERNAL_SERVER_ERROR
        )
