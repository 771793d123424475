"""In-memory fakes for testing.

These implement the same abstract interfaces as the HTTP adapters but keep
everything in memory. No network, no file I/O.
"""

from __future__ import annotations

import asyncio
import json
from decimal import Decimal

import httpx

from orderdraft.domain.exceptions import QuoteError, SubmissionRejected
from orderdraft.domain.model.offering import (
    Offering,
    PricingStrategy,
    ProductType,
    ServiceAction,
)
from orderdraft.domain.model.order import Order, OrderLine, OrderSubmission
from orderdraft.domain.model.quote import QuoteRequest, QuoteResult
from orderdraft.domain.model.value_objects import Money
from orderdraft.domain.repository.offering_catalog import OfferingCatalog
from orderdraft.domain.repository.order_repository import OrderRepository
from orderdraft.domain.service.quote_service import QuoteService


def sample_offerings() -> list[Offering]:
    """A small catalog.

    - type 1 / action 1: fixed at $15.00
    - type 1 / action 2: fixed at $5.00
    - type 2 / action 1: $12.00 per square meter
    - type 3 / action 1: two offerings, ambiguous
    """
    return [
        Offering(
            id="10",
            product_type_id="1",
            service_action_id="1",
            pricing_strategy=PricingStrategy.FIXED,
            display_name="Shirt - Wash",
            default_price=Money.of("15.00"),
            applicable_unit="piece",
        ),
        Offering(
            id="11",
            product_type_id="1",
            service_action_id="2",
            pricing_strategy=PricingStrategy.FIXED,
            display_name="Shirt - Iron",
            default_price=Money.of("5.00"),
            applicable_unit="piece",
        ),
        Offering(
            id="20",
            product_type_id="2",
            service_action_id="1",
            pricing_strategy=PricingStrategy.DIMENSION_BASED,
            display_name="Carpet - Wash",
            default_price_per_sq_meter=Money.of("12.00"),
            applicable_unit="m2",
        ),
        Offering(
            id="30",
            product_type_id="3",
            service_action_id="1",
            pricing_strategy=PricingStrategy.FIXED,
            display_name="Curtain - Wash",
            default_price=Money.of("20.00"),
        ),
        Offering(
            id="31",
            product_type_id="3",
            service_action_id="1",
            pricing_strategy=PricingStrategy.FIXED,
            display_name="Curtain - Wash (express)",
            default_price=Money.of("30.00"),
        ),
    ]


class FakeOfferingCatalog(OfferingCatalog):

    def __init__(self, offerings: list[Offering] | None = None) -> None:
        self._offerings = list(offerings if offerings is not None else sample_offerings())

    async def list_offerings(self) -> list[Offering]:
        return list(self._offerings)

    async def list_product_types(self) -> list[ProductType]:
        ids = sorted({o.product_type_id for o in self._offerings})
        return [ProductType(id=i, name=f"Type {i}") for i in ids]

    async def list_service_actions(self) -> list[ServiceAction]:
        ids = sorted({o.service_action_id for o in self._offerings})
        return [ServiceAction(id=i, name=f"Action {i}") for i in ids]


class FakeQuoteService(QuoteService):
    """Prices from the offering's catalog price, like the backend's default rule.

    Call :meth:`hold` to park every request until :meth:`release` is called,
    which lets tests interleave edits with in-flight quotes.
    """

    def __init__(self, offerings: list[Offering] | None = None) -> None:
        self._offerings = {
            o.id: o for o in (offerings if offerings is not None else sample_offerings())
        }
        self.calls: list[QuoteRequest] = []
        self._failures: dict[str, str] = {}
        self._crashes: set[str] = set()
        self._held = False
        self._parked: list[tuple[QuoteRequest, asyncio.Future[None]]] = []

    # --- Controls -------------------------------------------------------------

    def fail(self, offering_id: str, message: str) -> None:
        self._failures[offering_id] = message

    def succeed(self, offering_id: str) -> None:
        self._failures.pop(offering_id, None)
        self._crashes.discard(offering_id)

    def crash(self, offering_id: str) -> None:
        self._crashes.add(offering_id)

    def hold(self) -> None:
        self._held = True

    def release(self, request: QuoteRequest | None = None) -> None:
        """Let parked calls proceed: the one for ``request``, or all of them."""
        remaining = []
        for parked, future in self._parked:
            if request is None or parked == request:
                if not future.done():
                    future.set_result(None)
            else:
                remaining.append((parked, future))
        self._parked = remaining
        if request is None:
            self._held = False

    @property
    def parked(self) -> list[QuoteRequest]:
        return [request for request, _ in self._parked]

    # --- QuoteService interface -----------------------------------------------

    async def quote(self, request: QuoteRequest) -> QuoteResult:
        self.calls.append(request)
        if self._held:
            future = asyncio.get_running_loop().create_future()
            self._parked.append((request, future))
            await future
        else:
            await asyncio.sleep(0)

        if request.offering_id in self._crashes:
            raise RuntimeError("connection reset")
        if request.offering_id in self._failures:
            raise QuoteError(self._failures[request.offering_id])

        offering = self._offerings[request.offering_id]
        if offering.is_dimension_based:
            area = request.length * request.width
            unit = offering.default_price_per_sq_meter.amount * area
        else:
            unit = offering.default_price.amount
        unit = unit.quantize(Decimal("0.01"))
        return QuoteResult(
            unit_price=Money(unit),
            subtotal=Money(unit * request.quantity),
            applied_unit=offering.applicable_unit,
            strategy_applied=offering.pricing_strategy,
        )


class FakeOrderRepository(OrderRepository):

    def __init__(self, orders: list[Order] | None = None) -> None:
        self._store: dict[str, Order] = {o.id: o for o in orders or []}
        self._next_id = 1
        self.submissions: list[OrderSubmission] = []
        self.rejection: SubmissionRejected | None = None

    async def get_by_id(self, order_id: str) -> Order | None:
        return self._store.get(order_id)

    async def create(self, submission: OrderSubmission) -> Order:
        order_id = str(self._next_id)
        self._next_id += 1
        return self._save(order_id, submission)

    async def update(self, order_id: str, submission: OrderSubmission) -> Order:
        return self._save(order_id, submission)

    def _save(self, order_id: str, submission: OrderSubmission) -> Order:
        self.submissions.append(submission)
        if self.rejection is not None:
            raise self.rejection
        lines = [
            OrderLine(
                id=line.id or f"{order_id}-{position}",
                service_offering_id=line.service_offering_id,
                quantity=line.quantity,
                unit_price=Money.zero(),
                subtotal=Money.zero(),
                length=line.length,
                width=line.width,
                description=line.description or "",
                notes=line.notes or "",
            )
            for position, line in enumerate(submission.items, start=1)
        ]
        order = Order(
            id=order_id,
            customer_id=submission.customer_id,
            items=lines,
            order_number=f"ORD-{int(order_id):04d}",
            notes=submission.notes or "",
            due_date=submission.due_date,
        )
        self._store[order_id] = order
        return order


# --- HTTP backend ---------------------------------------------------------------


RAW_OFFERINGS = [
    {
        "id": 10,
        "productType": {"id": 1, "name": "Shirt"},
        "serviceAction": {"id": 1, "name": "Wash"},
        "pricing_strategy": "fixed",
        "default_price": "15.00",
        "display_name": "Shirt - Wash",
        "applicable_unit": "piece",
    },
    {
        "id": 11,
        "product_type_id": 1,
        "service_action_id": 2,
        "pricing_strategy": "fixed",
        "default_price": 5,
        "name_override": "Shirt - Iron",
        "applicable_unit": "piece",
    },
    {
        "id": 20,
        "product_type_id": 2,
        "service_action_id": 1,
        "pricing_strategy": "dimension_based",
        "default_price_per_sq_meter": "12.00",
        "display_name": "Carpet - Wash",
        "applicable_unit": "m2",
    },
]


class FakeBackend:
    """A stand-in for the order API, served through ``httpx.MockTransport``.

    Prices quotes from ``RAW_OFFERINGS`` and keeps created orders in memory.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.quote_errors: dict[int, str] = {}
        self.order_errors: dict[str, list[str]] | None = None
        self.orders: dict[int, dict] = {}
        self._next_id = 1

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def bodies(self, method: str, path: str) -> list[dict]:
        return [
            json.loads(r.content)
            for r in self.requests
            if r.method == method and r.url.path == path
        ]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = (request.method, request.url.path)

        if route == ("GET", "/api/service-offerings/all-for-select"):
            return httpx.Response(200, json={"data": RAW_OFFERINGS})
        if route == ("GET", "/api/product-types/all"):
            return httpx.Response(200, json={"data": [
                {"id": 1, "name": "Shirt", "base_measurement_unit": "item"},
                {"id": 2, "name": "Carpet", "base_measurement_unit": "sq_meter"},
            ]})
        if route == ("GET", "/api/service-actions"):
            return httpx.Response(200, json={"data": [
                {"id": 1, "name": "Wash"},
                {"id": 2, "name": "Iron"},
            ]})
        if route == ("POST", "/api/orders/quote-item"):
            return self._quote(json.loads(request.content))
        if route == ("POST", "/api/orders"):
            return self._store(None, json.loads(request.content))
        if request.url.path.startswith("/api/orders/"):
            order_id = int(request.url.path.rsplit("/", 1)[1])
            if request.method == "PUT":
                return self._store(order_id, json.loads(request.content))
            if order_id in self.orders:
                return httpx.Response(200, json={"data": self.orders[order_id]})
        return httpx.Response(404, json={"message": "Not Found"})

    def _unit_price(self, body: dict) -> tuple[Decimal, dict]:
        offering = next(o for o in RAW_OFFERINGS if o["id"] == body["service_offering_id"])
        if offering["pricing_strategy"] == "dimension_based":
            area = Decimal(str(body["length_meters"])) * Decimal(str(body["width_meters"]))
            unit = Decimal(offering["default_price_per_sq_meter"]) * area
        else:
            unit = Decimal(str(offering["default_price"]))
        return unit.quantize(Decimal("0.01")), offering

    def _quote(self, body: dict) -> httpx.Response:
        message = self.quote_errors.get(body["service_offering_id"])
        if message is not None:
            return httpx.Response(422, json={"message": message})
        unit, offering = self._unit_price(body)
        return httpx.Response(200, json={
            "calculated_price_per_unit_item": float(unit),
            "sub_total": float(unit * body["quantity"]),
            "applied_unit": offering["applicable_unit"],
            "strategy_applied": offering["pricing_strategy"],
        })

    def _store(self, order_id: int | None, body: dict) -> httpx.Response:
        if self.order_errors is not None:
            return httpx.Response(
                422, json={"message": "The given data was invalid.", "errors": self.order_errors}
            )
        if order_id is None:
            order_id = self._next_id
            self._next_id += 1
        items = []
        for position, line in enumerate(body["items"], start=1):
            unit, _ = self._unit_price(line)
            items.append({
                "id": line.get("id", order_id * 100 + position),
                "service_offering_id": line["service_offering_id"],
                "quantity": line["quantity"],
                "product_description_custom": line.get("product_description_custom"),
                "length_meters": line.get("length_meters"),
                "width_meters": line.get("width_meters"),
                "notes": line.get("notes"),
                "calculated_price_per_unit_item": str(unit),
                "sub_total": str(unit * line["quantity"]),
            })
        order = {
            "id": order_id,
            "order_number": f"ORD-{order_id:04d}",
            "customer_id": body["customer_id"],
            "status": "pending",
            "notes": body.get("notes"),
            "due_date": f"{body['due_date']}T00:00:00.000000Z" if body.get("due_date") else None,
            "items": items,
        }
        self.orders[order_id] = order
        return httpx.Response(201, json={"data": order})
