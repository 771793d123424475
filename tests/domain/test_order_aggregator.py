"""Unit tests for the Order Aggregator."""

from orderdraft.domain.model.line_item import LineItem
from orderdraft.domain.model.order_draft import OrderDraft
from orderdraft.domain.model.quote import IDLE, Failed, Quoted, QuoteRequest, QuoteResult, Quoting
from orderdraft.domain.model.value_objects import Money
from orderdraft.domain.service import order_aggregator
from orderdraft.domain.service.offering_resolver import NO_MATCH_ERROR, OfferingIndex
from tests.fakes import sample_offerings

INDEX = OfferingIndex(sample_offerings())


def _item(quote=IDLE, **fields) -> LineItem:
    defaults = dict(product_type_id="1", service_action_id="1", quantity=1, offering=INDEX.get("10"))
    defaults.update(fields)
    return LineItem(quote=quote, **defaults)


def _quoted(subtotal: str) -> Quoted:
    request = QuoteRequest(offering_id="10", customer_id="7", quantity=1)
    return Quoted(request, QuoteResult(unit_price=Money.of(subtotal), subtotal=Money.of(subtotal)))


REQUEST = QuoteRequest(offering_id="10", customer_id="7", quantity=1)


class TestTotal:

    def test_sums_quoted_subtotals(self):
        items = [_item(_quoted("30.00")), _item(_quoted("12.50"))]
        assert order_aggregator.total(items) == Money.of("42.50")

    def test_unquoted_and_failed_items_count_as_zero(self):
        items = [
            _item(_quoted("30.00")),
            _item(),
            _item(Quoting(REQUEST)),
            _item(Failed(REQUEST, "nope")),
        ]
        assert order_aggregator.total(items) == Money.of("30.00")

    def test_empty(self):
        assert str(order_aggregator.total([])) == "$0.00"


class TestSubmissionGate:

    def test_all_quoted_can_submit(self):
        draft = OrderDraft(items=(_item(_quoted("15")), _item(_quoted("5"))), customer_id="7")
        assert order_aggregator.can_submit(draft)
        assert order_aggregator.submission_blockers(draft) == []

    def test_blocked_while_any_item_quoting(self):
        draft = OrderDraft(items=(_item(_quoted("15")), _item(Quoting(REQUEST))), customer_id="7")
        assert order_aggregator.any_quoting(draft.items)
        assert not order_aggregator.can_submit(draft)
        assert "Prices are still being calculated" in order_aggregator.submission_blockers(draft)

    def test_blocked_by_failed_item(self):
        draft = OrderDraft(items=(_item(Failed(REQUEST, "Customer is blocked")),), customer_id="7")
        assert order_aggregator.submission_blockers(draft) == ["Item 1: Customer is blocked"]

    def test_blocked_without_customer(self):
        draft = OrderDraft(items=(_item(_quoted("15")),))
        assert order_aggregator.submission_blockers(draft) == ["Customer is required"]

    def test_blocked_without_items(self):
        draft = OrderDraft(customer_id="7")
        assert order_aggregator.submission_blockers(draft) == [
            "Order must contain at least one item"
        ]

    def test_blocked_by_unresolved_offering(self):
        item = _item(offering=None, resolution_error=NO_MATCH_ERROR)
        draft = OrderDraft(items=(item,), customer_id="7")
        assert order_aggregator.submission_blockers(draft) == [f"Item 1: {NO_MATCH_ERROR}"]

    def test_blocked_by_invalid_quantity(self):
        draft = OrderDraft(items=(_item(quantity="0"),), customer_id="7")
        assert order_aggregator.submission_blockers(draft) == [
            "Item 1: quantity must be at least 1"
        ]

    def test_blocked_by_missing_dimensions(self):
        item = _item(product_type_id="2", offering=INDEX.get("20"), length="2.5", width="0")
        draft = OrderDraft(items=(item,), customer_id="7")
        assert order_aggregator.submission_blockers(draft) == [
            "Item 1: length and width must be greater than 0"
        ]

    def test_dimension_item_with_both_dimensions_passes(self):
        item = _item(
            _quoted("30"), product_type_id="2", offering=INDEX.get("20"), length="2.5", width="1"
        )
        assert order_aggregator.can_submit(OrderDraft(items=(item,), customer_id="7"))
