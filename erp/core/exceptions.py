"""
Domain exceptions for the ERP application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class ERPError(Exception):
    """Base exception for all ERP errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(ERPError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class SequenceAllocationError(StorageError):
    """No document number could be allocated."""

    def __init__(self, document_type: str, reason: str):
        super().__init__(
            f"Could not allocate a number for {document_type}: {reason}",
            code="SEQUENCE_ALLOCATION_FAILED",
            details={"document_type": document_type, "reason": reason},
        )


# Not Found Exceptions
class NotFoundError(ERPError):
    """Base exception for missing entities."""

    pass


class ProductNotFoundError(NotFoundError):
    """Product not found (or soft-deleted)."""

    def __init__(self, product_id: str):
        super().__init__(
            f"Product not found: {product_id}",
            code="PRODUCT_NOT_FOUND",
            details={"product_id": product_id},
        )


class DocumentNotFoundError(NotFoundError):
    """Document not found in storage."""

    def __init__(self, document_id: str, document_type: str | None = None):
        super().__init__(
            f"Document not found: {document_id}",
            code="DOCUMENT_NOT_FOUND",
            details={"document_id": document_id, "document_type": document_type},
        )


class ContactNotFoundError(NotFoundError):
    """Contact (client or supplier) not found."""

    def __init__(self, contact_id: str):
        super().__init__(
            f"Contact not found: {contact_id}",
            code="CONTACT_NOT_FOUND",
            details={"contact_id": contact_id},
        )


class WarehouseNotFoundError(NotFoundError):
    """Warehouse not found."""

    def __init__(self, warehouse_id: str):
        super().__init__(
            f"Warehouse not found: {warehouse_id}",
            code="WAREHOUSE_NOT_FOUND",
            details={"warehouse_id": warehouse_id},
        )


# Conflict Exceptions
class ConflictError(ERPError):
    """Base exception for uniqueness conflicts."""

    pass


class DuplicateDocumentNumberError(ConflictError):
    """Document number already used within its table."""

    def __init__(self, document_number: str):
        super().__init__(
            f"Document number already exists: {document_number}",
            code="DUPLICATE_DOCUMENT_NUMBER",
            details={"document_number": document_number},
        )


class DuplicateSkuError(ConflictError):
    """Product SKU already used."""

    def __init__(self, sku: str):
        super().__init__(
            f"A product with SKU '{sku}' already exists",
            code="DUPLICATE_SKU",
            details={"sku": sku},
        )


# Validation Exceptions
class ValidationError(ERPError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class InvalidIdentifierError(ValidationError):
    """Identifier does not have the expected format."""

    def __init__(self, field: str, value: Any, expected: str):
        super().__init__(
            field=field,
            message=f"Invalid identifier format, expected {expected}",
            value=value,
        )
        self.code = "INVALID_IDENTIFIER"
        self.details["expected"] = expected


class InvalidLineItemError(ValidationError):
    """One or more line items are not well-formed."""

    def __init__(self, problems: list[str]):
        super().__init__(
            field="items",
            message="; ".join(problems) if problems else "at least one line item is required",
        )
        self.code = "INVALID_LINE_ITEM"
        self.details["problems"] = problems


class UnknownDocumentTypeError(ValidationError):
    """Document type is not one of the known kinds."""

    def __init__(self, document_type: str):
        super().__init__(
            field="document_type",
            message=f"Unknown document type '{document_type}'",
            value=document_type,
        )
        self.code = "UNKNOWN_DOCUMENT_TYPE"


class IllegalStatusTransitionError(ValidationError):
    """Requested status change is not allowed for the document type."""

    def __init__(self, document_type: str, current: str, requested: str):
        super().__init__(
            field="status",
            message=f"{document_type} cannot move from '{current}' to '{requested}'",
            value=requested,
        )
        self.code = "ILLEGAL_STATUS_TRANSITION"
        self.details.update(
            {
                "document_type": document_type,
                "current": current,
                "requested": requested,
            }
        )


class DocumentLockedError(ValidationError):
    """Line items of a document in a terminal status cannot change."""

    def __init__(self, document_number: str, status: str):
        super().__init__(
            field="items",
            message=f"Document {document_number} is '{status}' and its items can no longer change",
        )
        self.code = "DOCUMENT_LOCKED"
        self.details.update({"document_number": document_number, "status": status})


class ConfirmationRequiredError(ValidationError):
    """Destructive operation invoked without explicit confirmation."""

    def __init__(self, operation: str):
        super().__init__(
            field="confirm",
            message=f"{operation} requires explicit confirmation (confirm=true)",
        )
        self.code = "CONFIRMATION_REQUIRED"
        self.details["operation"] = operation


class ConfigurationError(ERPError):
    """Configuration error."""

    pass
