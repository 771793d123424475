"""Offering catalog records.

An Offering is a sellable (product type x service action) combination.
Offerings are owned by the catalog: the pricing engine looks them up but
never mutates them, so they are frozen for the whole composition session.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from orderdraft.domain.exceptions import ValidationError
from orderdraft.domain.model.value_objects import Money


class PricingStrategy(Enum):
    FIXED = "fixed"
    DIMENSION_BASED = "dimension_based"

    @staticmethod
    def parse(raw: str | None) -> PricingStrategy:
        """Map a catalog strategy name onto the two strategies the engine knows.

        The backend also labels some offerings ``per_unit_product`` or
        ``customer_specific``; neither needs dimensions, so both quote like
        ``fixed`` on the client.
        """
        if raw == PricingStrategy.DIMENSION_BASED.value:
            return PricingStrategy.DIMENSION_BASED
        return PricingStrategy.FIXED


@dataclass(frozen=True)
class ProductType:
    id: str
    name: str
    base_measurement_unit: str | None = None


@dataclass(frozen=True)
class ServiceAction:
    id: str
    name: str


@dataclass(frozen=True)
class Offering:
    """A priced (product type, action) pair.

    ``default_price`` is meaningful for fixed offerings and
    ``default_price_per_sq_meter`` for dimension-based ones.
    """

    id: str
    product_type_id: str
    service_action_id: str
    pricing_strategy: PricingStrategy
    display_name: str = ""
    default_price: Money | None = None
    default_price_per_sq_meter: Money | None = None
    applicable_unit: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationError("Offering id is required")
        if not self.product_type_id or not self.service_action_id:
            raise ValidationError(
                f"Offering {self.id} must reference a product type and an action"
            )

    @property
    def is_dimension_based(self) -> bool:
        return self.pricing_strategy is PricingStrategy.DIMENSION_BASED

    @property
    def base_price(self) -> Money | None:
        """The catalog price for this offering's strategy, if any."""
        if self.is_dimension_based:
            return self.default_price_per_sq_meter
        return self.default_price
