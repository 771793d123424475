"""OrderRepository backed by the backend's ``/orders`` resource."""

from __future__ import annotations

from typing import Any

from orderdraft.domain.exceptions import DomainException, SubmissionRejected
from orderdraft.domain.model.order import Order, OrderSubmission
from orderdraft.domain.repository.order_repository import OrderRepository
from orderdraft.infrastructure.http.api_client import ApiClient, ApiError, unwrap
from orderdraft.infrastructure.serialization import (
    order_from_raw,
    submission_to_raw,
    wire_id,
)


class HttpOrderRepository(OrderRepository):

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def get_by_id(self, order_id: str) -> Order | None:
        try:
            payload = await self._api.get(f"/orders/{wire_id(order_id)}")
        except ApiError as exc:
            if exc.status_code == 404:
                return None
            raise DomainException(exc.message) from exc
        return self._parse(payload)

    async def create(self, submission: OrderSubmission) -> Order:
        return await self._send("POST", "/orders", submission)

    async def update(self, order_id: str, submission: OrderSubmission) -> Order:
        return await self._send("PUT", f"/orders/{wire_id(order_id)}", submission)

    async def _send(self, method: str, path: str, submission: OrderSubmission) -> Order:
        try:
            payload = await self._api.request(method, path, submission_to_raw(submission))
        except ApiError as exc:
            raise SubmissionRejected(exc.message, exc.field_errors) from exc
        return self._parse(payload)

    @staticmethod
    def _parse(payload: Any) -> Order:
        record = unwrap(payload)
        if not isinstance(record, dict):
            raise DomainException("The server returned an invalid order")
        return order_from_raw(record)
