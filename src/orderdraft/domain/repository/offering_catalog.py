"""Abstract read-only catalog of offerings.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (HTTP, JSON file) live in the
infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from orderdraft.domain.model.offering import Offering, ProductType, ServiceAction


class OfferingCatalog(ABC):

    @abstractmethod
    async def list_offerings(self) -> list[Offering]:
        """Return every active offering."""

    @abstractmethod
    async def list_product_types(self) -> list[ProductType]:
        """Return every product type, for the product type selector."""

    @abstractmethod
    async def list_service_actions(self) -> list[ServiceAction]:
        """Return every service action, for the action selector."""
