"""CLI commands for browsing the offering catalog."""

from __future__ import annotations

import asyncio

import click

from orderdraft.domain.exceptions import DomainException
from orderdraft.domain.model.offering import Offering, ServiceAction
from orderdraft.infrastructure import bootstrap


async def _load_offerings() -> list[Offering]:
    settings = bootstrap.settings()
    async with bootstrap.api_client(settings) as api:
        return await bootstrap.offering_catalog(settings, api).list_offerings()


async def _load_actions(product_type_id: str) -> tuple[list[str], dict[str, ServiceAction]]:
    settings = bootstrap.settings()
    async with bootstrap.api_client(settings) as api:
        catalog = bootstrap.offering_catalog(settings, api)
        index = await bootstrap.offering_index(catalog)
        names = {action.id: action for action in await catalog.list_service_actions()}
    return index.actions_for(product_type_id), names


@click.command("offerings")
def catalog_offerings() -> None:
    """List every active offering."""
    try:
        offerings = asyncio.run(_load_offerings())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not offerings:
        click.echo("No offerings found.")
        return

    click.echo(f"{'ID':<6} {'Type':<6} {'Action':<7} {'Name':<28} {'Strategy':<16} {'Price':>10}")
    click.echo("-" * 78)
    for o in offerings:
        price = str(o.base_price) if o.base_price is not None else "-"
        click.echo(
            f"{o.id:<6} {o.product_type_id:<6} {o.service_action_id:<7} "
            f"{o.display_name[:28]:<28} {o.pricing_strategy.value:<16} {price:>10}"
        )


@click.command("actions")
@click.option("--product-type", "product_type_id", required=True, help="Product type ID.")
def catalog_actions(product_type_id: str) -> None:
    """List the service actions offered for a product type."""
    try:
        action_ids, names = asyncio.run(_load_actions(product_type_id))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not action_ids:
        click.echo(f"No service actions offered for product type {product_type_id}.")
        return

    for action_id in action_ids:
        action = names.get(action_id)
        click.echo(f"{action_id:<6} {action.name if action else ''}")
