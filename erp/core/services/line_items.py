"""
Line item validation and stock movement planning.

The planner turns a change to a document's lines into the ledger deltas
that keep product stock equal to the sum of its movements. Outbound
documents debit stock, so a new line of quantity q plans -q and removing
it plans +q.
"""

from dataclasses import dataclass

from erp.core.entities.document import LineItem
from erp.core.entities.inventory import MovementEvent
from erp.core.exceptions import InvalidLineItemError


@dataclass(frozen=True)
class PlannedMovement:
    """One ledger delta to apply for a line change."""

    product_id: str
    quantity: float
    event: MovementEvent
    description: str


def line_problems(item: LineItem) -> list[str]:
    """Human-readable reasons a line is not well formed (empty if it is)."""
    problems = []
    label = f"line {item.position + 1}"
    if not item.description or not item.description.strip():
        problems.append(f"{label}: description is required")
    if item.quantity <= 0:
        problems.append(f"{label}: quantity must be greater than 0")
    if item.unit_price <= 0:
        problems.append(f"{label}: unit price must be greater than 0")
    return problems


def validate_line_items(items: list[LineItem], strict: bool = True) -> list[LineItem]:
    """
    Check line items and return the ones to persist, renumbered by position.

    strict: reject if any line is invalid.
    lenient: reject only if every line is invalid, and drop the invalid ones.

    Raises:
        InvalidLineItemError: If the lines cannot be accepted
    """
    if not items:
        raise InvalidLineItemError([])

    for position, item in enumerate(items):
        item.position = position

    problems_by_line = [line_problems(item) for item in items]
    problems = [p for line in problems_by_line for p in line]

    if strict and problems:
        raise InvalidLineItemError(problems)
    if all(problems_by_line):
        raise InvalidLineItemError(problems)

    valid = [item for item, issues in zip(items, problems_by_line) if not issues]
    for position, item in enumerate(valid):
        item.position = position
    return valid


def plan_create(items: list[LineItem], reference: str) -> list[PlannedMovement]:
    """Debit every product line of a new document."""
    return [
        PlannedMovement(
            product_id=item.product_id,
            quantity=-item.quantity,
            event=MovementEvent.CREATE,
            description=f"{reference}: {item.description}",
        )
        for item in items
        if item.product_id
    ]


def plan_reversal(
    items: list[LineItem],
    reference: str,
    event: MovementEvent = MovementEvent.CANCEL,
) -> list[PlannedMovement]:
    """Return every product line of a document to stock."""
    return [
        PlannedMovement(
            product_id=item.product_id,
            quantity=item.quantity,
            event=event,
            description=f"Reversal of {reference}: {item.description}",
        )
        for item in items
        if item.product_id
    ]


def plan_line_changes(
    old_items: list[LineItem],
    new_items: list[LineItem],
    reference: str,
) -> list[PlannedMovement]:
    """
    Diff two line sets, pairing lines by position.

    - same product, new quantity: one adjustment of -(new - old)
    - different product: +old on the old product, -new on the new one
    - line removed: +old (cancel)
    - line added: -new (create)
    """
    plan: list[PlannedMovement] = []

    for old, new in zip(old_items, new_items):
        if old.product_id == new.product_id:
            delta = new.quantity - old.quantity
            if old.product_id and delta:
                plan.append(
                    PlannedMovement(
                        product_id=old.product_id,
                        quantity=-delta,
                        event=MovementEvent.ADJUSTMENT,
                        description=(
                            f"{reference}: quantity {old.quantity:g} -> {new.quantity:g}"
                        ),
                    )
                )
            continue

        if old.product_id:
            plan.append(
                PlannedMovement(
                    product_id=old.product_id,
                    quantity=old.quantity,
                    event=MovementEvent.UPDATE,
                    description=f"{reference}: product replaced on line {old.position + 1}",
                )
            )
        if new.product_id:
            plan.append(
                PlannedMovement(
                    product_id=new.product_id,
                    quantity=-new.quantity,
                    event=MovementEvent.UPDATE,
                    description=f"{reference}: product set on line {new.position + 1}",
                )
            )

    removed = old_items[len(new_items):]
    added = new_items[len(old_items):]
    plan.extend(plan_reversal(removed, reference))
    plan.extend(plan_create(added, reference))
    return plan
