"""
Core business logic services.

Layer-pure services that depend only on:
- erp/core/entities/*
- erp/core/interfaces/*
- erp/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from erp.core.services.dashboard import DashboardService, DashboardSummary
from erp.core.services.document_lifecycle import DocumentLifecycleManager, PurgeResult
from erp.core.services.document_numbers import (
    ParsedDocumentNumber,
    format_document_number,
    is_valid_document_number,
    parse_document_number,
)
from erp.core.services.line_items import (
    PlannedMovement,
    plan_line_changes,
    validate_line_items,
)
from erp.core.services.status_transitions import (
    allowed_transitions,
    can_transition,
    initial_status,
    is_terminal,
)
from erp.core.services.stock_service import StockService

__all__ = [
    # Document lifecycle
    "DocumentLifecycleManager",
    "PurgeResult",
    # Numbering
    "ParsedDocumentNumber",
    "format_document_number",
    "parse_document_number",
    "is_valid_document_number",
    # Line items
    "PlannedMovement",
    "plan_line_changes",
    "validate_line_items",
    # Status machines
    "allowed_transitions",
    "can_transition",
    "initial_status",
    "is_terminal",
    # Stock
    "StockService",
    # Dashboard
    "DashboardService",
    "DashboardSummary",
]
