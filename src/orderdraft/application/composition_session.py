"""Composition session: the owner of one OrderDraft.

Orchestrates the flow between user edits and the pricing engine:

1. Every change is an intent passed to :meth:`CompositionSession.dispatch`,
   which runs the draft reducer and notifies listeners synchronously.
2. User edits restart the debounce window.
3. When input settles, :meth:`reconcile` resolves offerings for the items
   whose pricing inputs changed, runs the readiness gate and hands ready
   items to the quote coordinator.

Nothing else keeps a copy of item state; listeners always receive the
draft the session currently holds.
"""

from __future__ import annotations

import logging
from typing import Callable

from orderdraft.application.debouncer import (
    DEFAULT_WINDOW_SECONDS,
    ChangeDebouncer,
    SettleDiff,
)
from orderdraft.application.quote_coordinator import QuoteCoordinator
from orderdraft.application.submit_order import SubmitOrderHandler, map_submission_errors
from orderdraft.domain.exceptions import SubmissionRejected, ValidationError
from orderdraft.domain.model.intents import (
    AddItem,
    ApplySubmissionErrors,
    Intent,
    RemoveItem,
    ResolveOffering,
    SetCustomer,
    SetItemField,
    SetOrderField,
)
from orderdraft.domain.model.line_item import PRICING_FIELDS, LineItem
from orderdraft.domain.model.order import Order
from orderdraft.domain.model.order_draft import OrderDraft, reduce
from orderdraft.domain.model.value_objects import Money
from orderdraft.domain.service import order_aggregator
from orderdraft.domain.service.offering_resolver import OfferingIndex
from orderdraft.domain.service.quote_service import QuoteService
from orderdraft.domain.service.readiness_gate import build_quote_request

logger = logging.getLogger(__name__)

Listener = Callable[[OrderDraft], None]

USER_INTENTS = (AddItem, RemoveItem, SetItemField, SetCustomer)


class CompositionSession:

    def __init__(
        self,
        catalog: OfferingIndex,
        quote_service: QuoteService,
        draft: OrderDraft | None = None,
        debounce_window: float = DEFAULT_WINDOW_SECONDS,
    ) -> None:
        self._catalog = catalog
        self._draft = draft if draft is not None else OrderDraft.new()
        self._listeners: list[Listener] = []
        self._settle_diff = SettleDiff()
        self._debouncer: ChangeDebouncer[OrderDraft] = ChangeDebouncer(
            debounce_window, snapshot=lambda: self._draft, on_settle=self.reconcile
        )
        self._coordinator = QuoteCoordinator(
            quote_service, dispatch=self.dispatch, current_draft=lambda: self._draft
        )
        self.reconcile_passes = 0

        # Items loaded from an existing order already carry their stored
        # price or resolution error; they wait for an edit like settled items.
        for item in self._draft.items:
            if item.quoted_subtotal is not None or item.resolution_error is not None:
                self._settle_diff.record(item)

    # --- State ----------------------------------------------------------------

    @property
    def draft(self) -> OrderDraft:
        return self._draft

    @property
    def catalog(self) -> OfferingIndex:
        return self._catalog

    @property
    def coordinator(self) -> QuoteCoordinator:
        return self._coordinator

    @property
    def debouncer(self) -> ChangeDebouncer[OrderDraft]:
        return self._debouncer

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with the draft after every change."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    # --- Mutation channel -----------------------------------------------------

    def dispatch(self, intent: Intent) -> OrderDraft:
        before = self._draft
        after = reduce(before, intent)
        if after is before:
            return after
        self._draft = after
        self._track(intent, before, after)
        for listener in list(self._listeners):
            listener(after)
        return after

    def _track(self, intent: Intent, before: OrderDraft, after: OrderDraft) -> None:
        if isinstance(intent, SetItemField):
            if intent.field in PRICING_FIELDS:
                old = before.get_item(intent.item_id)
                new = after.get_item(intent.item_id)
                if old.pricing_inputs != new.pricing_inputs:
                    self._settle_diff.invalidate(intent.item_id)
        elif isinstance(intent, SetCustomer):
            for item in after.items:
                self._settle_diff.invalidate(item.id)
        elif isinstance(intent, RemoveItem):
            self._settle_diff.forget(intent.item_id)
        if isinstance(intent, USER_INTENTS):
            self._debouncer.touch()

    # --- User-facing helpers --------------------------------------------------

    def add_item(self, **fields: object) -> str:
        item = LineItem(**fields)  # type: ignore[arg-type]
        self.dispatch(AddItem(item))
        return item.id

    def remove_item(self, item_id: str) -> None:
        self.dispatch(RemoveItem(item_id))

    def set_field(self, item_id: str, field: str, value: object) -> None:
        self.dispatch(SetItemField(item_id=item_id, field=field, value=value))

    def set_customer(self, customer_id: str | None) -> None:
        self.dispatch(SetCustomer(customer_id))

    def set_notes(self, notes: str) -> None:
        self.dispatch(SetOrderField("notes", notes))

    def set_due_date(self, due_date: str | None) -> None:
        self.dispatch(SetOrderField("due_date", due_date or None))

    def available_actions(self, item_id: str) -> list[str]:
        item = self._draft.get_item(item_id)
        if not item.pricing_inputs.product_type_id:
            return []
        return self._catalog.actions_for(item.pricing_inputs.product_type_id)

    # --- Reconciliation -------------------------------------------------------

    def reconcile(self, snapshot: OrderDraft | None = None) -> int:
        """Re-derive pricing for every item whose inputs changed.

        Returns the number of quote requests issued.
        """
        snapshot = snapshot if snapshot is not None else self._draft
        self.reconcile_passes += 1
        issued = 0
        for settled in self._settle_diff.changed(snapshot.items):
            if self._draft.find_item(settled.id) is None:
                continue
            offering, error = self._catalog.resolve_item(settled)
            self.dispatch(ResolveOffering(settled.id, offering, error))

            item = self._draft.get_item(settled.id)
            self._settle_diff.record(item)
            request = build_quote_request(item, item.offering, self._draft.customer_id)
            if request is not None and self._coordinator.request(item, request):
                issued += 1
        logger.debug("Reconcile pass %d issued %d quote(s)", self.reconcile_passes, issued)
        return issued

    async def settle(self) -> None:
        """Run any pending reconciliation now and wait for all quotes."""
        self._debouncer.flush()
        await self._coordinator.wait_idle()

    def close(self) -> None:
        self._debouncer.cancel()
        self._coordinator.cancel_all()
        self._listeners.clear()

    # --- Aggregates -----------------------------------------------------------

    @property
    def total(self) -> Money:
        return order_aggregator.total(self._draft.items)

    @property
    def any_quoting(self) -> bool:
        return order_aggregator.any_quoting(self._draft.items)

    def submission_blockers(self) -> list[str]:
        return order_aggregator.submission_blockers(self._draft)

    @property
    def can_submit(self) -> bool:
        return order_aggregator.can_submit(self._draft)

    # --- Submission -----------------------------------------------------------

    async def submit(self, handler: SubmitOrderHandler) -> Order:
        """Settle, check the submission gate and hand the draft to ``handler``.

        Field errors from a rejected submission are written back onto the
        matching items before the rejection is re-raised.
        """
        await self.settle()
        blockers = self.submission_blockers()
        if blockers:
            raise ValidationError("; ".join(blockers))

        self.dispatch(ApplySubmissionErrors())
        try:
            order = await handler.handle(self._draft)
        except SubmissionRejected as exc:
            self.dispatch(map_submission_errors(self._draft, exc))
            raise
        logger.info("Order %s saved with %d item(s)", order.id, len(order.items))
        return order
