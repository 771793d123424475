"""CLI command for pricing a single offering."""

from __future__ import annotations

import asyncio

import click

from orderdraft.domain.exceptions import DomainException, EntityNotFoundError, ValidationError
from orderdraft.domain.model.line_item import LineItem
from orderdraft.domain.model.quote import QuoteRequest, QuoteResult
from orderdraft.domain.service.readiness_gate import build_quote_request
from orderdraft.infrastructure import bootstrap


async def _quote(
    offering_id: str,
    customer_id: str,
    quantity: str,
    length: str | None,
    width: str | None,
) -> tuple[QuoteRequest, QuoteResult]:
    settings = bootstrap.settings()
    async with bootstrap.api_client(settings) as api:
        index = await bootstrap.offering_index(bootstrap.offering_catalog(settings, api))
        offering = index.get(offering_id)
        if offering is None:
            raise EntityNotFoundError(f"Offering #{offering_id} not found")

        item = LineItem(
            product_type_id=offering.product_type_id,
            service_action_id=offering.service_action_id,
            quantity=quantity,
            length=length,
            width=width,
            offering=offering,
        )
        request = build_quote_request(item, offering, customer_id)
        if request is None:
            if offering.is_dimension_based:
                raise ValidationError(
                    "A valid quantity and positive --length and --width are required"
                )
            raise ValidationError("A customer and a quantity of at least 1 are required")
        return request, await bootstrap.quote_service(api).quote(request)


@click.command("quote")
@click.option("--offering", "offering_id", required=True, help="Offering ID.")
@click.option("--customer", "customer_id", required=True, help="Customer ID.")
@click.option("--quantity", default="1", show_default=True, help="Quantity.")
@click.option("--length", default=None, help="Length in meters (dimension-based offerings).")
@click.option("--width", default=None, help="Width in meters (dimension-based offerings).")
def quote(
    offering_id: str,
    customer_id: str,
    quantity: str,
    length: str | None,
    width: str | None,
) -> None:
    """Ask the backend to price one offering for a customer."""
    try:
        request, result = asyncio.run(
            _quote(offering_id, customer_id, quantity, length, width)
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Offering #{request.offering_id} x {request.quantity}")
    if request.length is not None:
        click.echo(f"Dimensions: {request.length} x {request.width} m")
    unit = f" / {result.applied_unit}" if result.applied_unit else ""
    click.echo(f"Unit price: {result.unit_price}{unit}")
    click.echo(f"Subtotal:   {result.subtotal}")
    if result.message:
        click.echo(result.message)
