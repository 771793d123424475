"""Tests for the LoadOrder use case."""

import asyncio
from decimal import Decimal

import pytest

from orderdraft.application.composition_session import CompositionSession
from orderdraft.application.load_order import LoadOrderHandler
from orderdraft.domain.exceptions import EntityNotFoundError
from orderdraft.domain.model.order import Order, OrderLine
from orderdraft.domain.model.quote import QuoteStatus
from orderdraft.domain.model.value_objects import Money
from orderdraft.domain.service.offering_resolver import NO_MATCH_ERROR, OfferingIndex
from tests.fakes import FakeOrderRepository, FakeQuoteService, sample_offerings

INDEX = OfferingIndex(sample_offerings())


def _stored_order() -> Order:
    return Order(
        id="42",
        customer_id="7",
        order_number="ORD-0042",
        notes="handle with care",
        due_date="2026-11-01",
        items=[
            OrderLine(
                id="501",
                service_offering_id="10",
                quantity=2,
                unit_price=Money.of("14.00"),
                subtotal=Money.of("28.00"),
                description="white shirt",
            ),
            OrderLine(
                id="502",
                service_offering_id="20",
                quantity=1,
                unit_price=Money.of("36.00"),
                subtotal=Money.of("36.00"),
                length=Decimal("2.5"),
                width=Decimal("1.2"),
            ),
            OrderLine(
                id="503",
                service_offering_id="999",
                quantity=1,
                unit_price=Money.of("1.00"),
                subtotal=Money.of("1.00"),
            ),
        ],
    )


def _load():
    repo = FakeOrderRepository([_stored_order()])
    return asyncio.run(LoadOrderHandler(repo).handle("42", INDEX))


class TestLoadOrder:

    def test_order_fields(self):
        draft = _load()
        assert draft.order_id == "42"
        assert draft.customer_id == "7"
        assert draft.notes == "handle with care"
        assert draft.due_date == "2026-11-01"

    def test_items_start_quoted_at_stored_price(self):
        first, second, _ = _load().items
        assert first.server_id == "501"
        assert first.product_type_id == "1"
        assert first.service_action_id == "1"
        assert first.status is QuoteStatus.QUOTED
        assert first.quoted_subtotal == Money.of("28.00")
        assert second.length == "2.5"
        assert second.quoted_unit_price == Money.of("36.00")

    def test_unknown_offering_is_flagged(self):
        unknown = _load().items[2]
        assert unknown.offering is None
        assert unknown.resolution_error == NO_MATCH_ERROR

    def test_missing_order(self):
        with pytest.raises(EntityNotFoundError, match="Order #9 not found"):
            asyncio.run(LoadOrderHandler(FakeOrderRepository()).handle("9", INDEX))

    def test_opening_an_order_does_not_requote(self):
        draft = _load()

        async def scenario():
            quotes = FakeQuoteService()
            session = CompositionSession(INDEX, quotes, draft=draft, debounce_window=0.01)
            await session.settle()
            session.set_field(draft.items[0].id, "quantity", "3")
            await session.settle()
            return session, quotes

        session, quotes = asyncio.run(scenario())
        assert [call.offering_id for call in quotes.calls] == ["10"]
        assert session.draft.items[0].quoted_subtotal == Money.of("45.00")
        assert session.draft.items[1].quoted_subtotal == Money.of("36.00")
        assert session.draft.items[2].resolution_error == NO_MATCH_ERROR
