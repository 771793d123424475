"""QuoteService backed by ``POST /orders/quote-item``."""

from __future__ import annotations

from orderdraft.domain.exceptions import QuoteError, ValidationError
from orderdraft.domain.model.quote import QuoteRequest, QuoteResult
from orderdraft.domain.service.quote_service import QuoteService
from orderdraft.infrastructure.http.api_client import ApiClient, ApiError
from orderdraft.infrastructure.serialization import (
    quote_request_to_raw,
    quote_result_from_raw,
)


class HttpQuoteService(QuoteService):

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def quote(self, request: QuoteRequest) -> QuoteResult:
        try:
            payload = await self._api.post("/orders/quote-item", quote_request_to_raw(request))
        except ApiError as exc:
            raise QuoteError(exc.message) from exc
        if not isinstance(payload, dict):
            raise QuoteError("The server returned an invalid quote")
        try:
            return quote_result_from_raw(payload)
        except (KeyError, ValidationError) as exc:
            raise QuoteError("The server returned an invalid quote") from exc
