"""Order: a persisted order as returned by the backend.

Only read when an existing order is opened for editing; the draft is built
from it and the order itself is never mutated by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from orderdraft.domain.model.value_objects import Money


@dataclass(frozen=True)
class OrderLine:
    """A stored line item with the price the backend computed at save time."""

    id: str
    service_offering_id: str
    quantity: int
    unit_price: Money
    subtotal: Money
    length: Decimal | None = None
    width: Decimal | None = None
    description: str = ""
    notes: str = ""


@dataclass(frozen=True)
class Order:
    id: str
    customer_id: str
    items: list[OrderLine] = field(default_factory=list)
    order_number: str = ""
    status: str = "pending"
    notes: str = ""
    due_date: str | None = None

    @property
    def total(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.subtotal
        return result


@dataclass(frozen=True)
class SubmissionLine:
    """One item as sent to the backend: inputs only, never quoted figures."""

    service_offering_id: str
    quantity: int
    length: Decimal | None = None
    width: Decimal | None = None
    description: str | None = None
    notes: str | None = None
    id: str | None = None  # backend id of an existing row being updated


@dataclass(frozen=True)
class OrderSubmission:
    customer_id: str
    items: tuple[SubmissionLine, ...]
    notes: str | None = None
    due_date: str | None = None
