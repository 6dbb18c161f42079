"""API middleware."""

from erp.api.middleware.error_handler import ErrorHandlerMiddleware
from erp.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
