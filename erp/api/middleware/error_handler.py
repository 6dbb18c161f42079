"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from erp.application.dto.responses import ErrorResponse
from erp.config import get_logger
from erp.core.exceptions import (
    ConfigurationError,
    ConflictError,
    ERPError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes; first match wins
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

# Hint messages per error code / exception type
HINT_MAP: dict[str, str] = {
    "PRODUCT_NOT_FOUND": "Check the product ID and try GET /api/products to list products.",
    "DOCUMENT_NOT_FOUND": "Check the document ID and type, and try GET /api/documents/{type}.",
    "CONTACT_NOT_FOUND": "Check the contact ID and try GET /api/contacts.",
    "WAREHOUSE_NOT_FOUND": "Try GET /api/warehouses to list known warehouses.",
    "DUPLICATE_SKU": "A product with this SKU already exists. Use a different SKU.",
    "DUPLICATE_DOCUMENT_NUMBER": "The number was taken concurrently. Retry the request.",
    "INVALID_LINE_ITEM": "Every line needs a description, a positive quantity and a positive unit price.",
    "ILLEGAL_STATUS_TRANSITION": "See allowed_transitions on the document for valid next statuses.",
    "DOCUMENT_LOCKED": "Items of a document in a final status cannot change.",
    "CONFIRMATION_REQUIRED": "Repeat the request with ?confirm=true.",
    "UNKNOWN_DOCUMENT_TYPE": "Use one of: invoice, estimate, purchase_order, delivery_note, credit_note, statement, purchase_invoice, divers.",
    "INVALID_IDENTIFIER": "Document numbers look like INV-03/26/0001.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "SEQUENCE_ALLOCATION_FAILED": "No document number could be allocated. Check server logs.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "ValueError": "A parameter value is invalid. Check the request.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with existing data.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_json(request: Request, exc: Exception) -> JSONResponse:
    """Convert an exception to the standard JSON error body."""
    status_code = status_for(exc)
    error_code = exc.code if isinstance(exc, ERPError) else exc.__class__.__name__

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_error",
        path=request.url.path,
        error_type=error_code,
        error=str(exc),
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    error_response = ErrorResponse(
        error_code=error_code,
        message=str(exc),
        hint=_get_hint(error_code, status_code),
        detail=", ".join(
            f"{k}={v}" for k, v in exc.details.items() if v is not None
        )
        if isinstance(exc, ERPError) and exc.details
        else None,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Catches anything that escaped the exception handlers below.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return error_json(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(ERPError)
    async def erp_exception_handler(request: Request, exc: ERPError) -> JSONResponse:
        return error_json(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = {404: "NOT_FOUND", 405: "METHOD_NOT_ALLOWED"}.get(
            exc.status_code, "HTTP_ERROR"
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )
