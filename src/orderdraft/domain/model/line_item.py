"""LineItem: one row of an order under composition.

User-editable fields hold raw form input exactly as typed; the engine owns
the derived fields (``offering``, ``quote``, ``resolution_error``) and is the
only writer of them, through the draft reducer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping, NamedTuple
from uuid import uuid4

from orderdraft.domain.model.offering import Offering, PricingStrategy
from orderdraft.domain.model.quote import (
    IDLE,
    Failed,
    QuoteState,
    QuoteStatus,
    Quoted,
)
from orderdraft.domain.model.value_objects import (
    Money,
    normalize_id,
    parse_dimension,
    parse_quantity,
)

PRICING_FIELDS = frozenset(
    {"product_type_id", "service_action_id", "quantity", "length", "width"}
)
USER_FIELDS = PRICING_FIELDS | {"description", "notes"}

Dimension = str | int | float | Decimal | None


class PricingInputs(NamedTuple):
    """The pricing-relevant fields of an item, normalized for comparison."""

    product_type_id: str | None
    service_action_id: str | None
    quantity: int | None
    length: Decimal | None
    width: Decimal | None


def pricing_inputs_changed(before: PricingInputs | None, after: PricingInputs) -> bool:
    return before != after


def new_item_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class LineItem:
    id: str = field(default_factory=new_item_id)
    product_type_id: str | None = None
    service_action_id: str | None = None
    quantity: str | int = 1
    length: Dimension = None
    width: Dimension = None
    description: str = ""
    notes: str = ""
    server_id: str | None = None  # set only for rows loaded from an existing order

    # --- Engine-owned ---------------------------------------------------------
    offering: Offering | None = None
    quote: QuoteState = IDLE
    resolution_error: str | None = None
    field_errors: Mapping[str, str] = field(default_factory=dict)

    @property
    def pricing_inputs(self) -> PricingInputs:
        return PricingInputs(
            product_type_id=normalize_id(self.product_type_id),
            service_action_id=normalize_id(self.service_action_id),
            quantity=parse_quantity(self.quantity),
            length=parse_dimension(self.length),
            width=parse_dimension(self.width),
        )

    @property
    def pricing_strategy(self) -> PricingStrategy | None:
        return self.offering.pricing_strategy if self.offering else None

    @property
    def status(self) -> QuoteStatus:
        return self.quote.status

    @property
    def is_quoting(self) -> bool:
        return self.quote.status is QuoteStatus.QUOTING

    # --- Quote readouts -------------------------------------------------------

    @property
    def quoted_unit_price(self) -> Money | None:
        return self.quote.result.unit_price if isinstance(self.quote, Quoted) else None

    @property
    def quoted_subtotal(self) -> Money | None:
        return self.quote.result.subtotal if isinstance(self.quote, Quoted) else None

    @property
    def quoted_applied_unit(self) -> str | None:
        return self.quote.result.applied_unit if isinstance(self.quote, Quoted) else None

    @property
    def quote_error(self) -> str | None:
        return self.quote.error if isinstance(self.quote, Failed) else None
