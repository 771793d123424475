"""Domain service: Offering Resolver.

Maps a line item's (product type, action) selection onto the unique catalog
offering for that pair.  The catalog is indexed once per load so each lookup
is a dict access; resolution itself is pure and deterministic.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from orderdraft.domain.model.line_item import LineItem
from orderdraft.domain.model.offering import Offering

NO_MATCH_ERROR = "No service offering exists for the selected product type and action"
AMBIGUOUS_ERROR = "More than one service offering matches the selected product type and action"


class OfferingIndex:

    def __init__(self, offerings: Iterable[Offering]) -> None:
        self._offerings = tuple(offerings)
        self._by_pair: dict[tuple[str, str], list[Offering]] = defaultdict(list)
        self._actions_by_type: dict[str, list[str]] = defaultdict(list)
        for offering in self._offerings:
            self._by_pair[(offering.product_type_id, offering.service_action_id)].append(
                offering
            )
            actions = self._actions_by_type[offering.product_type_id]
            if offering.service_action_id not in actions:
                actions.append(offering.service_action_id)

    def __len__(self) -> int:
        return len(self._offerings)

    @property
    def offerings(self) -> tuple[Offering, ...]:
        return self._offerings

    def get(self, offering_id: str) -> Offering | None:
        for offering in self._offerings:
            if offering.id == offering_id:
                return offering
        return None

    def match(self, product_type_id: str, service_action_id: str) -> list[Offering]:
        return list(self._by_pair.get((product_type_id, service_action_id), ()))

    def actions_for(self, product_type_id: str) -> list[str]:
        """Service action ids that have at least one offering for this type."""
        return list(self._actions_by_type.get(product_type_id, ()))

    def resolve_item(self, item: LineItem) -> tuple[Offering | None, str | None]:
        """Return ``(offering, error)`` for one item.

        An item without both selections resolves to ``(None, None)``: it is
        simply not chosen yet, which is not an error.
        """
        inputs = item.pricing_inputs
        if inputs.product_type_id is None or inputs.service_action_id is None:
            return None, None
        matches = self.match(inputs.product_type_id, inputs.service_action_id)
        if not matches:
            return None, NO_MATCH_ERROR
        if len(matches) > 1:
            return None, AMBIGUOUS_ERROR
        return matches[0], None


def resolve(
    items: Iterable[LineItem], catalog: OfferingIndex | Iterable[Offering]
) -> dict[str, Offering | None]:
    """Resolve every item's offering, keyed by item id."""
    index = catalog if isinstance(catalog, OfferingIndex) else OfferingIndex(catalog)
    return {item.id: index.resolve_item(item)[0] for item in items}
