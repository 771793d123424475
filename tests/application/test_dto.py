"""Tests for the draft display DTOs."""

from orderdraft.application.dto import to_dto
from orderdraft.domain.model.line_item import LineItem
from orderdraft.domain.model.order_draft import OrderDraft
from orderdraft.domain.model.quote import Failed, Quoted, QuoteRequest, QuoteResult
from orderdraft.domain.model.value_objects import Money
from orderdraft.domain.service.offering_resolver import OfferingIndex
from tests.fakes import sample_offerings

INDEX = OfferingIndex(sample_offerings())


def test_draft_dto():
    request = QuoteRequest(offering_id="20", customer_id="7", quantity=1)
    draft = OrderDraft(
        customer_id="7",
        items=(
            LineItem(
                product_type_id="2", service_action_id="1", length="2", width="1.5",
                offering=INDEX.get("20"),
                quote=Quoted(request, QuoteResult(Money.of("36"), Money.of("36"), applied_unit="m2")),
            ),
            LineItem(
                product_type_id="1", service_action_id="1", offering=INDEX.get("10"),
                quote=Failed(QuoteRequest("10", "7", 1), "Customer is blocked"),
            ),
        ),
        general_errors=("Due date is in the past",),
    )

    dto = to_dto(draft)

    first, second = dto.items
    assert first.offering == "Carpet - Wash"
    assert first.dimensions == "2 x 1.5 m"
    assert first.status == "quoted"
    assert first.subtotal == "$36.00"
    assert first.applied_unit == "m2"
    assert second.status == "failed"
    assert second.unit_price == ""
    assert second.message == "Customer is blocked"
    assert dto.total == "$36.00"
    assert not dto.can_submit
    assert dto.blockers == ["Item 2: Customer is blocked"]
    assert dto.general_errors == ["Due date is in the past"]


def test_unselected_item():
    dto = to_dto(OrderDraft.new())
    item = dto.items[0]
    assert item.offering == "-"
    assert item.dimensions == ""
    assert item.status == "idle"
    assert dto.customer_id == ""
