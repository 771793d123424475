"""Application service: Submit Order use case.

Turns a settled draft into an OrderSubmission and hands it to the order
repository.  Only user inputs and the resolved offering id are sent; the
quoted figures are recomputed by the backend when it stores the order.
"""

from __future__ import annotations

import re

from orderdraft.domain.exceptions import SubmissionRejected, ValidationError
from orderdraft.domain.model.intents import ApplySubmissionErrors
from orderdraft.domain.model.order import Order, OrderSubmission, SubmissionLine
from orderdraft.domain.model.order_draft import OrderDraft
from orderdraft.domain.model.value_objects import Quantity
from orderdraft.domain.repository.order_repository import OrderRepository

# Backend field name -> LineItem field name.
ITEM_FIELD_NAMES = {
    "service_offering_id": "service_action_id",
    "product_type_id": "product_type_id",
    "service_action_id": "service_action_id",
    "quantity": "quantity",
    "length_meters": "length",
    "width_meters": "width",
    "product_description_custom": "description",
    "notes": "notes",
}

_ITEM_KEY = re.compile(r"^items\.(\d+)\.(.+)$")


class SubmitOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    async def handle(self, draft: OrderDraft) -> Order:
        """Create the order, or update it when the draft edits an existing one."""
        submission = self.build_submission(draft)
        if draft.order_id is not None:
            return await self._order_repo.update(draft.order_id, submission)
        return await self._order_repo.create(submission)

    @staticmethod
    def build_submission(draft: OrderDraft) -> OrderSubmission:
        if draft.customer_id is None:
            raise ValidationError("Customer is required")
        if not draft.items:
            raise ValidationError("Order must contain at least one item")

        lines: list[SubmissionLine] = []
        for position, item in enumerate(draft.items, start=1):
            if item.offering is None:
                raise ValidationError(f"Item {position}: service offering not found")
            inputs = item.pricing_inputs
            if inputs.quantity is None:
                raise ValidationError(f"Item {position}: quantity must be at least 1")
            quantity = Quantity(inputs.quantity)
            if item.offering.is_dimension_based and (inputs.length is None or inputs.width is None):
                raise ValidationError(
                    f"Item {position}: length and width must be greater than 0"
                )

            lines.append(
                SubmissionLine(
                    service_offering_id=item.offering.id,
                    quantity=quantity.value,
                    length=inputs.length if item.offering.is_dimension_based else None,
                    width=inputs.width if item.offering.is_dimension_based else None,
                    description=item.description.strip() or None,
                    notes=item.notes.strip() or None,
                    id=item.server_id,
                )
            )

        return OrderSubmission(
            customer_id=draft.customer_id,
            items=tuple(lines),
            notes=draft.notes.strip() or None,
            due_date=draft.due_date or None,
        )


def map_submission_errors(
    draft: OrderDraft, rejection: SubmissionRejected
) -> ApplySubmissionErrors:
    """Route backend validation errors to the items they belong to.

    Keys shaped ``items.<index>.<field>`` land on the item at that index;
    everything else, including indexes that no longer exist, becomes a
    general error.
    """
    item_errors: dict[str, dict[str, str]] = {}
    general: list[str] = []

    for key, messages in rejection.field_errors.items():
        message = " ".join(messages) if messages else str(rejection)
        match = _ITEM_KEY.match(key)
        if match is not None:
            index = int(match.group(1))
            if index < len(draft.items):
                item = draft.items[index]
                field = ITEM_FIELD_NAMES.get(match.group(2), match.group(2))
                item_errors.setdefault(item.id, {})[field] = message
                continue
        general.append(message)

    if not item_errors and not general:
        general.append(str(rejection))

    return ApplySubmissionErrors(item_errors=item_errors, general_errors=tuple(general))
