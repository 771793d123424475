"""OfferingCatalog backed by the backend's select-list endpoints."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from orderdraft.domain.exceptions import CatalogUnavailableError
from orderdraft.domain.model.offering import Offering, ProductType, ServiceAction
from orderdraft.domain.repository.offering_catalog import OfferingCatalog
from orderdraft.infrastructure.http.api_client import ApiClient, ApiError, unwrap
from orderdraft.infrastructure.serialization import (
    offering_from_raw,
    product_type_from_raw,
    service_action_from_raw,
)

T = TypeVar("T")


class HttpOfferingCatalog(OfferingCatalog):

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def list_offerings(self) -> list[Offering]:
        return await self._fetch("/service-offerings/all-for-select", offering_from_raw)

    async def list_product_types(self) -> list[ProductType]:
        return await self._fetch("/product-types/all", product_type_from_raw)

    async def list_service_actions(self) -> list[ServiceAction]:
        return await self._fetch("/service-actions", service_action_from_raw)

    async def _fetch(self, path: str, parse: Callable[[dict[str, Any]], T]) -> list[T]:
        try:
            records = unwrap(await self._api.get(path))
        except ApiError as exc:
            raise CatalogUnavailableError(exc.message) from exc
        if not isinstance(records, list):
            raise CatalogUnavailableError(f"Unexpected response from {path}")
        return [parse(record) for record in records]
