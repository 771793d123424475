"""OrderDraft aggregate and its reducer.

The draft is an immutable value: every change produces a new draft via
:func:`reduce`.  All invariants about engine-owned fields live here:

- a change to a pricing-relevant field resets the item's quote to ``Idle``
  before anything else can happen to it;
- changing the product type or action also forgets the resolved offering;
- a quote outcome is only applied while the item is still ``Quoting`` the
  exact request the outcome answers.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from orderdraft.domain.exceptions import EntityNotFoundError, ValidationError
from orderdraft.domain.model.intents import (
    AddItem,
    ApplyQuoteFailure,
    ApplyQuoteResult,
    ApplySubmissionErrors,
    BeginQuote,
    Intent,
    RemoveItem,
    ResolveOffering,
    SetCustomer,
    SetItemField,
    SetOrderField,
)
from orderdraft.domain.model.line_item import USER_FIELDS, LineItem
from orderdraft.domain.model.quote import IDLE, Failed, Quoted, Quoting
from orderdraft.domain.model.value_objects import normalize_id

MAX_LINE_ITEMS = 50
ORDER_FIELDS = ("notes", "due_date")


@dataclass(frozen=True)
class OrderDraft:
    """An order being composed (new) or edited (``order_id`` set)."""

    items: tuple[LineItem, ...] = ()
    customer_id: str | None = None
    notes: str = ""
    due_date: str | None = None
    order_id: str | None = None
    general_errors: tuple[str, ...] = ()

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def new(customer_id: str | None = None) -> OrderDraft:
        """A fresh draft with one blank line, like the new-order form."""
        return OrderDraft(items=(LineItem(),), customer_id=normalize_id(customer_id))

    # --- Lookups --------------------------------------------------------------

    def find_item(self, item_id: str) -> LineItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def get_item(self, item_id: str) -> LineItem:
        item = self.find_item(item_id)
        if item is None:
            raise EntityNotFoundError(f"Line item '{item_id}' not found in draft")
        return item

    def index_of(self, item_id: str) -> int:
        for index, item in enumerate(self.items):
            if item.id == item_id:
                return index
        raise EntityNotFoundError(f"Line item '{item_id}' not found in draft")

    # --- Internal helpers -----------------------------------------------------

    def _replace_item(self, updated: LineItem) -> OrderDraft:
        items = tuple(updated if item.id == updated.id else item for item in self.items)
        return replace(self, items=items)


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------


def reduce(draft: OrderDraft, intent: Intent) -> OrderDraft:
    """Apply one intent and return the resulting draft.

    Returns ``draft`` itself (same object) when the intent changes nothing,
    which callers use to detect discarded quote outcomes.
    """
    if isinstance(intent, AddItem):
        return _add_item(draft, intent)
    if isinstance(intent, RemoveItem):
        if draft.find_item(intent.item_id) is None:
            return draft
        return replace(
            draft, items=tuple(i for i in draft.items if i.id != intent.item_id)
        )
    if isinstance(intent, SetItemField):
        return _set_item_field(draft, intent)
    if isinstance(intent, SetCustomer):
        return _set_customer(draft, intent)
    if isinstance(intent, SetOrderField):
        if intent.field not in ORDER_FIELDS:
            raise ValidationError(f"Unknown order field '{intent.field}'")
        if getattr(draft, intent.field) == intent.value:
            return draft
        return replace(draft, **{intent.field: intent.value})
    if isinstance(intent, ResolveOffering):
        return _resolve_offering(draft, intent)
    if isinstance(intent, BeginQuote):
        item = draft.find_item(intent.item_id)
        if item is None:
            return draft
        return draft._replace_item(replace(item, quote=Quoting(intent.request)))
    if isinstance(intent, (ApplyQuoteResult, ApplyQuoteFailure)):
        return _apply_quote_outcome(draft, intent)
    if isinstance(intent, ApplySubmissionErrors):
        items = tuple(
            replace(item, field_errors=dict(intent.item_errors.get(item.id, {})))
            for item in draft.items
        )
        return replace(draft, items=items, general_errors=tuple(intent.general_errors))
    raise ValidationError(f"Unsupported intent {type(intent).__name__}")


def _add_item(draft: OrderDraft, intent: AddItem) -> OrderDraft:
    if len(draft.items) >= MAX_LINE_ITEMS:
        raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")
    item = intent.item or LineItem()
    if draft.find_item(item.id) is not None:
        raise ValidationError(f"Line item '{item.id}' already exists")
    # Derived fields of an incoming item are never trusted.
    item = replace(item, offering=None, quote=IDLE, resolution_error=None)
    return replace(draft, items=draft.items + (item,))


def _set_item_field(draft: OrderDraft, intent: SetItemField) -> OrderDraft:
    if intent.field not in USER_FIELDS:
        raise ValidationError(f"Field '{intent.field}' is not user-editable")
    item = draft.find_item(intent.item_id)
    if item is None:
        raise EntityNotFoundError(f"Line item '{intent.item_id}' not found in draft")
    if getattr(item, intent.field) == intent.value:
        return draft

    changes: dict[str, object] = {intent.field: intent.value}
    if intent.field == "product_type_id" and normalize_id(intent.value) != normalize_id(
        item.product_type_id
    ):
        # Actions are offered per product type; a new type starts unselected.
        changes["service_action_id"] = None
    if intent.field in item.field_errors:
        changes["field_errors"] = {
            k: v for k, v in item.field_errors.items() if k != intent.field
        }

    updated = replace(item, **changes)
    if updated.pricing_inputs != item.pricing_inputs:
        updated = replace(updated, quote=IDLE)
        if intent.field in ("product_type_id", "service_action_id"):
            updated = replace(updated, offering=None, resolution_error=None)
    return draft._replace_item(updated)


def _set_customer(draft: OrderDraft, intent: SetCustomer) -> OrderDraft:
    customer_id = normalize_id(intent.customer_id)
    if customer_id == draft.customer_id:
        return draft
    # Pricing may be customer specific: every quote is stale now.
    items = tuple(replace(item, quote=IDLE) for item in draft.items)
    return replace(draft, customer_id=customer_id, items=items)


def _resolve_offering(draft: OrderDraft, intent: ResolveOffering) -> OrderDraft:
    item = draft.find_item(intent.item_id)
    if item is None:
        return draft
    current_id = item.offering.id if item.offering else None
    new_id = intent.offering.id if intent.offering else None
    if current_id == new_id:
        if item.resolution_error == intent.error:
            return draft
        return draft._replace_item(replace(item, resolution_error=intent.error))

    changes: dict[str, object] = {
        "offering": intent.offering,
        "quote": IDLE,
        "resolution_error": intent.error,
    }
    if intent.offering is not None and not intent.offering.is_dimension_based:
        changes["length"] = None
        changes["width"] = None
    return draft._replace_item(replace(item, **changes))


def _apply_quote_outcome(
    draft: OrderDraft, intent: ApplyQuoteResult | ApplyQuoteFailure
) -> OrderDraft:
    item = draft.find_item(intent.item_id)
    if item is None:
        return draft
    if not isinstance(item.quote, Quoting) or item.quote.request != intent.request:
        return draft
    if isinstance(intent, ApplyQuoteResult):
        state = Quoted(request=intent.request, result=intent.result)
    else:
        state = Failed(request=intent.request, error=intent.error)
    return draft._replace_item(replace(item, quote=state))
