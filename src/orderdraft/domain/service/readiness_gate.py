"""Domain service: Readiness Gate.

Decides whether a line item carries enough information to be quoted.
Not being ready is a normal state while the user is still typing, so the
gate answers quietly and never raises.
"""

from __future__ import annotations

from orderdraft.domain.model.line_item import LineItem
from orderdraft.domain.model.offering import Offering
from orderdraft.domain.model.quote import QuoteRequest
from orderdraft.domain.model.value_objects import normalize_id


def is_ready_to_quote(
    item: LineItem, offering: Offering | None, customer_id: str | None
) -> bool:
    return build_quote_request(item, offering, customer_id) is not None


def build_quote_request(
    item: LineItem, offering: Offering | None, customer_id: str | None
) -> QuoteRequest | None:
    """Return the request this item would send right now, or None if not ready.

    Rules, in order:
    1. a customer is selected;
    2. quantity parses to an integer >= 1;
    3. dimension-based offerings need length and width both > 0.
    """
    customer = normalize_id(customer_id)
    if offering is None or customer is None:
        return None

    inputs = item.pricing_inputs
    if inputs.quantity is None:
        return None

    if offering.is_dimension_based:
        if inputs.length is None or inputs.width is None:
            return None
        return QuoteRequest(
            offering_id=offering.id,
            customer_id=customer,
            quantity=inputs.quantity,
            length=inputs.length,
            width=inputs.width,
        )

    return QuoteRequest(
        offering_id=offering.id, customer_id=customer, quantity=inputs.quantity
    )
