"""Change Debouncer.

Two pieces that together decide *when* and *for which items* the engine
reacts to edits:

- :class:`ChangeDebouncer` is a cancellable timer on the running asyncio
  loop.  Every ``touch()`` discards the pending settle and restarts the
  window; only a full quiet window emits the settled snapshot.
- :class:`SettleDiff` remembers the pricing inputs each item had when it was
  last reconciled, so a settle only re-prices items somebody actually touched.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Generic, Iterable, TypeVar

from orderdraft.domain.model.line_item import (
    LineItem,
    PricingInputs,
    pricing_inputs_changed,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_WINDOW_SECONDS = 0.75


class ChangeDebouncer(Generic[T]):

    def __init__(
        self,
        window: float,
        snapshot: Callable[[], T],
        on_settle: Callable[[T], None],
    ) -> None:
        if window < 0:
            raise ValueError("Debounce window cannot be negative")
        self._window = window
        self._snapshot = snapshot
        self._on_settle = on_settle
        self._handle: asyncio.TimerHandle | None = None

    @property
    def window(self) -> float:
        return self._window

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def touch(self) -> None:
        """Record a mutation: restart the quiet window from now."""
        if self._handle is not None:
            self._handle.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._window, self._fire)

    def cancel(self) -> None:
        """Drop a pending settle without emitting it."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> bool:
        """Emit a pending settle right away. Returns False if none was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def _fire(self) -> None:
        self._handle = None
        snapshot = self._snapshot()
        logger.debug("Input settled after %.0f ms window", self._window * 1000)
        self._on_settle(snapshot)


class SettleDiff:
    """Tracks the last-reconciled pricing inputs of every item."""

    def __init__(self) -> None:
        self._reconciled: dict[str, PricingInputs] = {}
        self._invalidated: set[str] = set()

    def invalidate(self, item_id: str) -> None:
        """Force the item through the next settle even if its inputs end up
        identical to the reconciled ones (changed and then changed back)."""
        self._invalidated.add(item_id)

    def changed(self, items: Iterable[LineItem]) -> list[LineItem]:
        return [
            item
            for item in items
            if item.id in self._invalidated
            or pricing_inputs_changed(self._reconciled.get(item.id), item.pricing_inputs)
        ]

    def record(self, item: LineItem) -> None:
        self._reconciled[item.id] = item.pricing_inputs
        self._invalidated.discard(item.id)

    def forget(self, item_id: str) -> None:
        self._reconciled.pop(item_id, None)
        self._invalidated.discard(item_id)
