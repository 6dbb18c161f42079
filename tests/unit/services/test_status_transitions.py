"""Tests for the per-type status machines."""

import pytest

from erp.core.entities.document import DocumentStatus as S
from erp.core.entities.document import DocumentType as T
from erp.core.exceptions import IllegalStatusTransitionError, UnknownDocumentTypeError
from erp.core.services.status_transitions import (
    TRANSITIONS,
    allowed_transitions,
    can_transition,
    ensure_transition,
    initial_status,
    is_terminal,
    statuses_for,
)


class TestInitialStatus:
    @pytest.mark.parametrize(
        "document_type,expected",
        [
            (T.INVOICE, S.DRAFT),
            (T.ESTIMATE, S.DRAFT),
            (T.PURCHASE_ORDER, S.PENDING),
            (T.DELIVERY_NOTE, S.PENDING),
            (T.DIVERS, S.PENDING),
            (T.CREDIT_NOTE, S.DRAFT),
            (T.PURCHASE_INVOICE, S.DRAFT),
        ],
    )
    def test_initial(self, document_type, expected):
        assert initial_status(document_type) == expected

    def test_statement_has_no_machine(self):
        with pytest.raises(UnknownDocumentTypeError):
            initial_status(T.STATEMENT)


class TestTransitions:
    def test_invoice_happy_path(self):
        assert can_transition(T.INVOICE, S.DRAFT, S.PENDING)
        assert can_transition(T.INVOICE, S.PENDING, S.PAID)
        assert can_transition(T.INVOICE, S.OVERDUE, S.PAID)

    def test_invoice_cannot_skip_to_paid_from_draft(self):
        assert not can_transition(T.INVOICE, S.DRAFT, S.PAID)

    def test_delivery_note_cancel_from_transit(self):
        assert can_transition(T.DELIVERY_NOTE, S.IN_TRANSIT, S.CANCELLED)

    def test_purchase_invoice_overdue_cannot_cancel(self):
        assert not can_transition(T.PURCHASE_INVOICE, S.OVERDUE, S.CANCELLED)

    def test_foreign_status_not_allowed(self):
        assert not can_transition(T.ESTIMATE, S.DRAFT, S.PAID)
        assert allowed_transitions(T.ESTIMATE, S.PAID) == frozenset()

    def test_same_status_rejected(self):
        with pytest.raises(IllegalStatusTransitionError):
            ensure_transition(T.INVOICE, S.DRAFT, S.DRAFT)

    def test_ensure_raises_with_details(self):
        with pytest.raises(IllegalStatusTransitionError) as exc_info:
            ensure_transition(T.INVOICE, S.PAID, S.DRAFT)
        assert exc_info.value.details["document_type"] == "invoice"
        assert exc_info.value.details["current"] == "paid"


class TestTerminal:
    @pytest.mark.parametrize("document_type", list(TRANSITIONS))
    def test_cancelled_is_terminal_everywhere(self, document_type):
        assert is_terminal(document_type, S.CANCELLED)

    @pytest.mark.parametrize("document_type", list(TRANSITIONS))
    def test_initial_is_not_terminal(self, document_type):
        assert not is_terminal(document_type, initial_status(document_type))

    def test_delivered_is_terminal(self):
        assert is_terminal(T.DELIVERY_NOTE, S.DELIVERED)

    @pytest.mark.parametrize("document_type", list(TRANSITIONS))
    def test_every_target_is_a_known_status(self, document_type):
        known = set(statuses_for(document_type))
        for targets in TRANSITIONS[document_type].values():
            assert targets <= known
