"""Mapping between backend JSON records and domain objects.

Shared by the HTTP adapters and the JSON-file catalog, which stores the
same records the ``all-for-select`` endpoints return.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from orderdraft.domain.exceptions import ValidationError
from orderdraft.domain.model.offering import (
    Offering,
    PricingStrategy,
    ProductType,
    ServiceAction,
)
from orderdraft.domain.model.order import Order, OrderLine, OrderSubmission
from orderdraft.domain.model.quote import QuoteRequest, QuoteResult
from orderdraft.domain.model.value_objects import Money, normalize_id


def wire_id(value: str | None) -> int | str | None:
    """The backend keys records by integer ids; keep anything else as is."""
    if value is None:
        return None
    return int(value) if value.isdigit() else value


def _money(raw: Any) -> Money | None:
    if raw is None or raw == "":
        return None
    return Money.of(raw)


def _decimal(raw: Any) -> Decimal | None:
    if raw is None or raw == "":
        return None
    try:
        return Decimal(str(raw))
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid number in backend response: {raw!r}") from exc


def _number(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def _nested_id(raw: dict, key: str, nested: str) -> str | None:
    value = normalize_id(raw.get(key))
    if value is None and isinstance(raw.get(nested), dict):
        value = normalize_id(raw[nested].get("id"))
    return value


# --- Catalog ------------------------------------------------------------------


def offering_from_raw(raw: dict) -> Offering:
    return Offering(
        id=normalize_id(raw.get("id")) or "",
        product_type_id=_nested_id(raw, "product_type_id", "productType") or "",
        service_action_id=_nested_id(raw, "service_action_id", "serviceAction") or "",
        pricing_strategy=PricingStrategy.parse(raw.get("pricing_strategy")),
        display_name=raw.get("display_name") or raw.get("name_override") or "",
        default_price=_money(raw.get("default_price")),
        default_price_per_sq_meter=_money(raw.get("default_price_per_sq_meter")),
        applicable_unit=raw.get("applicable_unit"),
    )


def product_type_from_raw(raw: dict) -> ProductType:
    return ProductType(
        id=normalize_id(raw.get("id")) or "",
        name=raw.get("name", ""),
        base_measurement_unit=raw.get("base_measurement_unit"),
    )


def service_action_from_raw(raw: dict) -> ServiceAction:
    return ServiceAction(id=normalize_id(raw.get("id")) or "", name=raw.get("name", ""))


# --- Quotes -------------------------------------------------------------------


def quote_request_to_raw(request: QuoteRequest) -> dict[str, Any]:
    return {
        "service_offering_id": wire_id(request.offering_id),
        "customer_id": wire_id(request.customer_id),
        "quantity": request.quantity,
        "length_meters": _number(request.length),
        "width_meters": _number(request.width),
    }


def quote_result_from_raw(raw: dict) -> QuoteResult:
    strategy = raw.get("strategy_applied")
    return QuoteResult(
        unit_price=Money.of(raw["calculated_price_per_unit_item"]),
        subtotal=Money.of(raw["sub_total"]),
        applied_unit=raw.get("applied_unit"),
        strategy_applied=PricingStrategy.parse(strategy) if strategy else None,
        message=raw.get("message"),
    )


# --- Orders -------------------------------------------------------------------


def submission_to_raw(submission: OrderSubmission) -> dict[str, Any]:
    items: list[dict[str, Any]] = []
    for line in submission.items:
        raw: dict[str, Any] = {
            "service_offering_id": wire_id(line.service_offering_id),
            "quantity": line.quantity,
            "product_description_custom": line.description,
            "length_meters": _number(line.length),
            "width_meters": _number(line.width),
            "notes": line.notes,
        }
        if line.id is not None:
            raw["id"] = wire_id(line.id)
        items.append(raw)
    return {
        "customer_id": wire_id(submission.customer_id),
        "items": items,
        "notes": submission.notes,
        "due_date": submission.due_date,
    }


def order_from_raw(raw: dict) -> Order:
    items = [
        OrderLine(
            id=normalize_id(i.get("id")) or "",
            service_offering_id=normalize_id(i.get("service_offering_id")) or "",
            quantity=int(i.get("quantity", 1)),
            unit_price=_money(i.get("calculated_price_per_unit_item")) or Money.zero(),
            subtotal=_money(i.get("sub_total")) or Money.zero(),
            length=_decimal(i.get("length_meters")),
            width=_decimal(i.get("width_meters")),
            description=i.get("product_description_custom") or "",
            notes=i.get("notes") or "",
        )
        for i in raw.get("items", [])
    ]
    due_date = raw.get("due_date")
    return Order(
        id=normalize_id(raw.get("id")) or "",
        customer_id=normalize_id(raw.get("customer_id")) or "",
        items=items,
        order_number=raw.get("order_number") or "",
        status=raw.get("status") or "pending",
        notes=raw.get("notes") or "",
        due_date=due_date[:10] if due_date else None,
    )
