"""Abstract remote pricing function.

The pricing algorithm runs on the server and is opaque to the engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from orderdraft.domain.model.quote import QuoteRequest, QuoteResult


class QuoteService(ABC):

    @abstractmethod
    async def quote(self, request: QuoteRequest) -> QuoteResult:
        """Price one line item.

        Raises QuoteError with the backend's message when it rejects the
        request or cannot compute a price.
        """
