import click

from orderdraft.infrastructure import bootstrap
from orderdraft.infrastructure.cli.catalog_commands import catalog_actions, catalog_offerings
from orderdraft.infrastructure.cli.draft_commands import draft_compose, draft_show
from orderdraft.infrastructure.cli.quote_commands import quote


@click.group()
def cli() -> None:
    """Order draft pricing engine"""
    bootstrap.configure_logging(bootstrap.settings())


@cli.group()
def catalog() -> None:
    """Browse the offering catalog."""


@cli.group()
def draft() -> None:
    """Compose and price orders."""


# Register subcommands
catalog.add_command(catalog_offerings)
catalog.add_command(catalog_actions)
draft.add_command(draft_compose)
draft.add_command(draft_show)
cli.add_command(quote)
