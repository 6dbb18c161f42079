"""Per-type document status machines."""

from erp.core.entities.document import DocumentStatus as S
from erp.core.entities.document import DocumentType as T
from erp.core.exceptions import IllegalStatusTransitionError, UnknownDocumentTypeError

_DELIVERY_FLOW = {
    S.PENDING: frozenset({S.IN_TRANSIT, S.DELIVERED, S.CANCELLED}),
    S.IN_TRANSIT: frozenset({S.DELIVERED, S.CANCELLED}),
    S.DELIVERED: frozenset(),
    S.CANCELLED: frozenset(),
}

# Statuses with no outgoing edge are terminal
TRANSITIONS: dict[T, dict[S, frozenset[S]]] = {
    T.INVOICE: {
        S.DRAFT: frozenset({S.PENDING, S.CANCELLED}),
        S.PENDING: frozenset({S.PAID, S.OVERDUE, S.CANCELLED}),
        S.OVERDUE: frozenset({S.PAID, S.CANCELLED}),
        S.PAID: frozenset(),
        S.CANCELLED: frozenset(),
    },
    T.ESTIMATE: {
        S.DRAFT: frozenset({S.SENT, S.CANCELLED}),
        S.SENT: frozenset({S.ACCEPTED, S.EXPIRED, S.CANCELLED}),
        S.ACCEPTED: frozenset(),
        S.EXPIRED: frozenset(),
        S.CANCELLED: frozenset(),
    },
    T.PURCHASE_ORDER: {
        S.PENDING: frozenset({S.SHIPPED, S.CANCELLED}),
        S.SHIPPED: frozenset({S.RECEIVED, S.CANCELLED}),
        S.RECEIVED: frozenset(),
        S.CANCELLED: frozenset(),
    },
    T.DELIVERY_NOTE: _DELIVERY_FLOW,
    T.DIVERS: _DELIVERY_FLOW,
    T.CREDIT_NOTE: {
        S.DRAFT: frozenset({S.SENT, S.CANCELLED}),
        S.SENT: frozenset({S.APPLIED, S.CANCELLED}),
        S.APPLIED: frozenset(),
        S.CANCELLED: frozenset(),
    },
    T.PURCHASE_INVOICE: {
        S.DRAFT: frozenset({S.RECEIVED, S.CANCELLED}),
        S.RECEIVED: frozenset({S.PAID, S.OVERDUE, S.CANCELLED}),
        S.OVERDUE: frozenset({S.PAID}),
        S.PAID: frozenset(),
        S.CANCELLED: frozenset(),
    },
}

INITIAL_STATUS: dict[T, S] = {
    T.INVOICE: S.DRAFT,
    T.ESTIMATE: S.DRAFT,
    T.PURCHASE_ORDER: S.PENDING,
    T.DELIVERY_NOTE: S.PENDING,
    T.DIVERS: S.PENDING,
    T.CREDIT_NOTE: S.DRAFT,
    T.PURCHASE_INVOICE: S.DRAFT,
}


def _machine(document_type: T) -> dict[S, frozenset[S]]:
    try:
        return TRANSITIONS[document_type]
    except KeyError:
        raise UnknownDocumentTypeError(str(document_type)) from None


def initial_status(document_type: T) -> S:
    _machine(document_type)
    return INITIAL_STATUS[document_type]


def statuses_for(document_type: T) -> list[S]:
    """Every status a document of this type can be in."""
    return list(_machine(document_type))


def allowed_transitions(document_type: T, current: S) -> frozenset[S]:
    return _machine(document_type).get(current, frozenset())


def can_transition(document_type: T, current: S, requested: S) -> bool:
    return requested in allowed_transitions(document_type, current)


def is_terminal(document_type: T, status: S) -> bool:
    return not allowed_transitions(document_type, status)


def ensure_transition(document_type: T, current: S, requested: S) -> None:
    """
    Raise unless `current -> requested` is an edge of the type's machine.

    Re-requesting the current status is also rejected.
    """
    if not can_transition(document_type, current, requested):
        raise IllegalStatusTransitionError(
            document_type.value, current.value, requested.value
        )
