"""JSON-file-backed implementation of OfferingCatalog.

The file holds the same records the backend's select-list endpoints return::

    {"offerings": [...], "product_types": [...], "service_actions": [...]}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from orderdraft.domain.exceptions import CatalogUnavailableError
from orderdraft.domain.model.offering import Offering, ProductType, ServiceAction
from orderdraft.domain.repository.offering_catalog import OfferingCatalog
from orderdraft.infrastructure.serialization import (
    offering_from_raw,
    product_type_from_raw,
    service_action_from_raw,
)


class JsonOfferingCatalog(OfferingCatalog):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    # --- OfferingCatalog interface --------------------------------------------

    async def list_offerings(self) -> list[Offering]:
        return [offering_from_raw(raw) for raw in self._section("offerings")]

    async def list_product_types(self) -> list[ProductType]:
        return [product_type_from_raw(raw) for raw in self._section("product_types")]

    async def list_service_actions(self) -> list[ServiceAction]:
        return [service_action_from_raw(raw) for raw in self._section("service_actions")]

    # --- Serialization helpers ------------------------------------------------

    def _section(self, key: str) -> list[dict[str, Any]]:
        records = self._load().get(key, [])
        if not isinstance(records, list):
            raise CatalogUnavailableError(f"'{key}' in {self._file_path} must be a list")
        return records

    def _load(self) -> dict[str, Any]:
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise CatalogUnavailableError(f"Catalog file not found: {self._file_path}") from exc
        except json.JSONDecodeError as exc:
            raise CatalogUnavailableError(f"Catalog file is not valid JSON: {exc}") from exc
        if not isinstance(raw, dict):
            raise CatalogUnavailableError(f"Catalog file must hold an object: {self._file_path}")
        return raw
