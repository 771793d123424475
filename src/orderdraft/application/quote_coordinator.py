"""Quote Request Coordinator.

Drives each line item through ``idle -> quoting -> quoted | failed``.

A request is issued as its own asyncio task, so items quote independently
and any number can be in flight.  Tasks are never cancelled when their item
changes; instead every outcome is dispatched tagged with the request it
answers, and the draft reducer drops it unless the item is still quoting
that exact request.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from orderdraft.domain.exceptions import DomainException
from orderdraft.domain.model.intents import (
    ApplyQuoteFailure,
    ApplyQuoteResult,
    BeginQuote,
    Intent,
)
from orderdraft.domain.model.line_item import LineItem
from orderdraft.domain.model.order_draft import OrderDraft
from orderdraft.domain.model.quote import Failed, Quoted, Quoting, QuoteRequest
from orderdraft.domain.service.quote_service import QuoteService

logger = logging.getLogger(__name__)

UNEXPECTED_QUOTE_ERROR = "Unable to calculate a price for this item"


class QuoteCoordinator:

    def __init__(
        self,
        quote_service: QuoteService,
        dispatch: Callable[[Intent], OrderDraft],
        current_draft: Callable[[], OrderDraft],
    ) -> None:
        self._quote_service = quote_service
        self._dispatch = dispatch
        self._current_draft = current_draft
        self._tasks: set[asyncio.Task[None]] = set()
        self.requests_issued = 0
        self.results_discarded = 0

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def request(self, item: LineItem, request: QuoteRequest) -> bool:
        """Start quoting ``item`` unless it already holds this request.

        Returns True when a new request was issued.
        """
        state = item.quote
        if isinstance(state, (Quoting, Quoted, Failed)) and state.request == request:
            return False

        self._dispatch(BeginQuote(item_id=item.id, request=request))
        self.requests_issued += 1
        logger.debug(
            "Quoting item %s: offering=%s qty=%s dims=%sx%s",
            item.id,
            request.offering_id,
            request.quantity,
            request.length,
            request.width,
        )
        task = asyncio.get_running_loop().create_task(self._run(item.id, request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True

    async def wait_idle(self) -> None:
        """Wait until no quote request is in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def cancel_all(self) -> None:
        for task in list(self._tasks):
            task.cancel()

    # --- Internal -------------------------------------------------------------

    async def _run(self, item_id: str, request: QuoteRequest) -> None:
        outcome: Intent
        try:
            result = await self._quote_service.quote(request)
        except DomainException as exc:
            logger.info("Quote rejected for item %s: %s", item_id, exc)
            outcome = ApplyQuoteFailure(item_id=item_id, request=request, error=str(exc))
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Quote request for item %s failed unexpectedly", item_id)
            outcome = ApplyQuoteFailure(
                item_id=item_id, request=request, error=UNEXPECTED_QUOTE_ERROR
            )
        else:
            outcome = ApplyQuoteResult(item_id=item_id, request=request, result=result)

        before = self._current_draft()
        after = self._dispatch(outcome)
        if after is before:
            self.results_discarded += 1
            logger.debug("Discarded stale quote outcome for item %s", item_id)
