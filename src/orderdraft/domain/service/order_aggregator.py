"""Domain service: Order Aggregator.

Order-level figures derived from the current line items.  Recomputed
synchronously on every change; nothing here is cached.
"""

from __future__ import annotations

from typing import Iterable

from orderdraft.domain.model.line_item import LineItem
from orderdraft.domain.model.order_draft import OrderDraft
from orderdraft.domain.model.quote import QuoteStatus
from orderdraft.domain.model.value_objects import Money


def total(items: Iterable[LineItem]) -> Money:
    """Sum of quoted subtotals; unquoted and failed items count as zero."""
    result = Money.zero()
    for item in items:
        subtotal = item.quoted_subtotal
        if subtotal is not None:
            result = result + subtotal
    return result


def any_quoting(items: Iterable[LineItem]) -> bool:
    return any(item.status is QuoteStatus.QUOTING for item in items)


def submission_blockers(draft: OrderDraft) -> list[str]:
    """Human-readable reasons the draft cannot be submitted yet."""
    reasons: list[str] = []
    if not draft.items:
        reasons.append("Order must contain at least one item")
    if draft.customer_id is None:
        reasons.append("Customer is required")
    if any_quoting(draft.items):
        reasons.append("Prices are still being calculated")

    for position, item in enumerate(draft.items, start=1):
        if item.status is QuoteStatus.FAILED:
            reasons.append(f"Item {position}: {item.quote_error}")
        if item.offering is None:
            reasons.append(
                f"Item {position}: {item.resolution_error or 'select a product type and action'}"
            )
        if item.pricing_inputs.quantity is None:
            reasons.append(f"Item {position}: quantity must be at least 1")
        if item.offering is not None and item.offering.is_dimension_based:
            if item.pricing_inputs.length is None or item.pricing_inputs.width is None:
                reasons.append(f"Item {position}: length and width must be greater than 0")
    return reasons


def can_submit(draft: OrderDraft) -> bool:
    return not submission_blockers(draft)
