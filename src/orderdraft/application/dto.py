"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from orderdraft.domain.model.order_draft import OrderDraft
from orderdraft.domain.service import order_aggregator


@dataclass(frozen=True)
class ItemSpec:
    """Input: one line as typed on the command line."""

    product_type_id: str
    service_action_id: str
    quantity: str
    length: str | None = None
    width: str | None = None


@dataclass(frozen=True)
class LineItemDTO:
    """Output: a single line item as displayed to the user."""

    position: int
    offering: str
    quantity: str
    dimensions: str
    status: str
    unit_price: str  # formatted, e.g. "$15.00", or "" when not quoted
    subtotal: str
    applied_unit: str
    message: str  # quote, resolution or submission error, if any


@dataclass(frozen=True)
class DraftDTO:
    """Output: the whole draft with its order-level figures."""

    customer_id: str
    items: list[LineItemDTO]
    total: str
    any_quoting: bool
    can_submit: bool
    blockers: list[str]
    general_errors: list[str]


def to_dto(draft: OrderDraft) -> DraftDTO:
    items: list[LineItemDTO] = []
    for position, item in enumerate(draft.items, start=1):
        inputs = item.pricing_inputs
        dimensions = ""
        if item.offering is not None and item.offering.is_dimension_based:
            dimensions = f"{inputs.length or '?'} x {inputs.width or '?'} m"
        items.append(
            LineItemDTO(
                position=position,
                offering=(item.offering.display_name or item.offering.id) if item.offering else "-",
                quantity=str(item.quantity),
                dimensions=dimensions,
                status=item.status.value,
                unit_price=str(item.quoted_unit_price) if item.quoted_unit_price is not None else "",
                subtotal=str(item.quoted_subtotal) if item.quoted_subtotal is not None else "",
                applied_unit=item.quoted_applied_unit or "",
                message=(
                    item.quote_error
                    or item.resolution_error
                    or "; ".join(item.field_errors.values())
                ),
            )
        )

    blockers = order_aggregator.submission_blockers(draft)
    return DraftDTO(
        customer_id=draft.customer_id or "",
        items=items,
        total=str(order_aggregator.total(draft.items)),
        any_quoting=order_aggregator.any_quoting(draft.items),
        can_submit=not blockers,
        blockers=blockers,
        general_errors=list(draft.general_errors),
    )
