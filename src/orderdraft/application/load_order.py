"""Application service: Load Order use case.

Builds an OrderDraft from a stored order so it can be edited.  Each line is
pre-populated with the price the backend stored for it, so opening an order
does not fire a round of quote requests.
"""

from __future__ import annotations

from dataclasses import replace

from orderdraft.domain.exceptions import EntityNotFoundError
from orderdraft.domain.model.line_item import LineItem
from orderdraft.domain.model.order import Order
from orderdraft.domain.model.order_draft import OrderDraft
from orderdraft.domain.model.quote import Quoted, QuoteResult
from orderdraft.domain.repository.order_repository import OrderRepository
from orderdraft.domain.service.offering_resolver import NO_MATCH_ERROR, OfferingIndex
from orderdraft.domain.service.readiness_gate import build_quote_request


class LoadOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    async def handle(self, order_id: str, catalog: OfferingIndex) -> OrderDraft:
        order = await self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return self.to_draft(order, catalog)

    @staticmethod
    def to_draft(order: Order, catalog: OfferingIndex) -> OrderDraft:
        items: list[LineItem] = []
        for line in order.items:
            offering = catalog.get(line.service_offering_id)
            item = LineItem(
                product_type_id=offering.product_type_id if offering else None,
                service_action_id=offering.service_action_id if offering else None,
                quantity=line.quantity,
                length=str(line.length) if line.length is not None else None,
                width=str(line.width) if line.width is not None else None,
                description=line.description,
                notes=line.notes,
                server_id=line.id,
                offering=offering,
                resolution_error=None if offering else NO_MATCH_ERROR,
            )
            if offering is not None:
                stored = QuoteResult(
                    unit_price=line.unit_price,
                    subtotal=line.subtotal,
                    applied_unit=offering.applicable_unit,
                    strategy_applied=offering.pricing_strategy,
                )
                request = build_quote_request(item, offering, order.customer_id)
                item = replace(item, quote=Quoted(request=request, result=stored))
            items.append(item)

        return OrderDraft(
            items=tuple(items),
            customer_id=order.customer_id,
            notes=order.notes,
            due_date=order.due_date,
            order_id=order.id,
        )

