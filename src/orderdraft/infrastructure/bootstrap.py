"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import logging

from orderdraft.application.composition_session import CompositionSession
from orderdraft.domain.model.order_draft import OrderDraft
from orderdraft.domain.repository.offering_catalog import OfferingCatalog
from orderdraft.domain.service.offering_resolver import OfferingIndex
from orderdraft.domain.service.quote_service import QuoteService
from orderdraft.infrastructure.config import Settings, load_settings
from orderdraft.infrastructure.http.api_client import ApiClient
from orderdraft.infrastructure.http.http_offering_catalog import HttpOfferingCatalog
from orderdraft.infrastructure.http.http_order_repository import HttpOrderRepository
from orderdraft.infrastructure.http.http_quote_service import HttpQuoteService
from orderdraft.infrastructure.persistence.json_offering_catalog import (
    JsonOfferingCatalog,
)


def settings() -> Settings:
    return load_settings()


def configure_logging(settings: Settings) -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def api_client(settings: Settings) -> ApiClient:
    return ApiClient(
        settings.api_url, token=settings.api_token, timeout=settings.http_timeout
    )


def offering_catalog(settings: Settings, api: ApiClient) -> OfferingCatalog:
    # A local catalog file, when configured, replaces the catalog endpoints.
    if settings.catalog_path is not None:
        return JsonOfferingCatalog(settings.catalog_path)
    return HttpOfferingCatalog(api)


def quote_service(api: ApiClient) -> HttpQuoteService:
    return HttpQuoteService(api)


def order_repository(api: ApiClient) -> HttpOrderRepository:
    return HttpOrderRepository(api)


async def offering_index(catalog: OfferingCatalog) -> OfferingIndex:
    return OfferingIndex(await catalog.list_offerings())


def composition_session(
    settings: Settings,
    catalog: OfferingIndex,
    quotes: QuoteService,
    draft: OrderDraft | None = None,
) -> CompositionSession:
    return CompositionSession(
        catalog, quotes, draft=draft, debounce_window=settings.debounce_seconds
    )
