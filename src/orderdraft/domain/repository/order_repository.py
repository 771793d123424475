"""Abstract repository for persisted orders."""

from __future__ import annotations

from abc import ABC, abstractmethod

from orderdraft.domain.model.order import Order, OrderSubmission


class OrderRepository(ABC):

    @abstractmethod
    async def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    async def create(self, submission: OrderSubmission) -> Order:
        """Create a new order.

        Raises SubmissionRejected when the backend refuses it.
        """

    @abstractmethod
    async def update(self, order_id: str, submission: OrderSubmission) -> Order:
        """Replace an existing order's contents."""
