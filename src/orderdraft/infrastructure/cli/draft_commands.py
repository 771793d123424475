"""CLI commands that drive a composition session."""

from __future__ import annotations

import asyncio

import click

from orderdraft.application.composition_session import CompositionSession
from orderdraft.application.dto import DraftDTO, ItemSpec, to_dto
from orderdraft.application.load_order import LoadOrderHandler
from orderdraft.application.submit_order import SubmitOrderHandler
from orderdraft.domain.exceptions import DomainException
from orderdraft.domain.model.order import Order
from orderdraft.domain.model.order_draft import OrderDraft
from orderdraft.infrastructure import bootstrap


def _parse_items(raw: str) -> list[ItemSpec]:
    """Parse '1:2:3,1:4:1:2.5x1.2' into ItemSpec list.

    Each entry is ``ProductType:Action:Qty`` with an optional ``:LxW`` in meters.
    """
    specs: list[ItemSpec] = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        parts = [part.strip() for part in entry.split(":")]
        if len(parts) not in (3, 4) or not all(parts):
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'ProductType:Action:Qty[:LxW]'."
            )
        length = width = None
        if len(parts) == 4:
            dims = parts[3].lower().split("x")
            if len(dims) != 2 or not all(d.strip() for d in dims):
                raise click.BadParameter(
                    f"Invalid dimensions '{parts[3]}'. Expected 'LengthxWidth', e.g. '2.5x1.2'."
                )
            length, width = dims[0].strip(), dims[1].strip()
        specs.append(
            ItemSpec(
                product_type_id=parts[0],
                service_action_id=parts[1],
                quantity=parts[2],
                length=length,
                width=width,
            )
        )
    if not specs:
        raise click.BadParameter("At least one item is required.")
    return specs


def _display_draft(dto: DraftDTO) -> None:
    click.echo(f"Customer: {dto.customer_id or '-'}")
    click.echo()
    click.echo(
        f"  {'#':>2} {'Offering':<24} {'Qty':>5} {'Dimensions':<14} "
        f"{'Status':<8} {'Price':>10} {'Subtotal':>10}"
    )
    click.echo(f"  {'-'*79}")
    for item in dto.items:
        click.echo(
            f"  {item.position:>2} {item.offering[:24]:<24} {item.quantity:>5} "
            f"{item.dimensions:<14} {item.status:<8} {item.unit_price:>10} {item.subtotal:>10}"
        )
        if item.message:
            click.echo(f"     ! {item.message}")
    click.echo(f"  {'-'*79}")
    click.echo(f"  {'Order Total':<27} {dto.total:>52}")
    for error in dto.general_errors:
        click.echo(f"  ! {error}")
    if dto.can_submit:
        click.echo("Ready to submit.")
    else:
        click.echo("Cannot submit: " + "; ".join(dto.blockers))


def _populate(session: CompositionSession, customer: str, specs: list[ItemSpec]) -> None:
    session.set_customer(customer)
    for spec in specs:
        session.add_item(
            product_type_id=spec.product_type_id,
            service_action_id=spec.service_action_id,
            quantity=spec.quantity,
            length=spec.length,
            width=spec.width,
        )


async def _compose(
    customer: str,
    specs: list[ItemSpec],
    notes: str | None,
    due_date: str | None,
    submit: bool,
) -> tuple[DraftDTO, Order | None, DomainException | None]:
    settings = bootstrap.settings()
    async with bootstrap.api_client(settings) as api:
        index = await bootstrap.offering_index(bootstrap.offering_catalog(settings, api))
        session = bootstrap.composition_session(
            settings, index, bootstrap.quote_service(api), draft=OrderDraft()
        )
        try:
            _populate(session, customer, specs)
            if notes:
                session.set_notes(notes)
            if due_date:
                session.set_due_date(due_date)
            await session.settle()

            order = None
            error = None
            if submit:
                try:
                    order = await session.submit(
                        SubmitOrderHandler(bootstrap.order_repository(api))
                    )
                except DomainException as exc:
                    error = exc
            return to_dto(session.draft), order, error
        finally:
            session.close()


async def _load(order_id: str) -> DraftDTO:
    settings = bootstrap.settings()
    async with bootstrap.api_client(settings) as api:
        index = await bootstrap.offering_index(bootstrap.offering_catalog(settings, api))
        draft = await LoadOrderHandler(bootstrap.order_repository(api)).handle(order_id, index)
    return to_dto(draft)


@click.command("compose")
@click.option("--customer", required=True, help="Customer ID.")
@click.option(
    "--items", required=True, help="Items as 'ProductType:Action:Qty[:LxW],...'."
)
@click.option("--notes", default=None, help="Order notes.")
@click.option("--due-date", default=None, help="Due date (YYYY-MM-DD).")
@click.option("--submit", is_flag=True, default=False, help="Save the order once priced.")
def draft_compose(
    customer: str,
    items: str,
    notes: str | None,
    due_date: str | None,
    submit: bool,
) -> None:
    """Compose an order, price every line and optionally submit it."""
    specs = _parse_items(items)

    try:
        dto, order, error = asyncio.run(_compose(customer, specs, notes, due_date, submit))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_draft(dto)
    if error is not None:
        raise click.ClickException(str(error))
    if order is not None:
        label = order.order_number or f"#{order.id}"
        click.echo(f"Order {label} saved  (status={order.status}, total={order.total})")


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to load.")
def draft_show(order_id: str) -> None:
    """Load an existing order into a draft and display it."""
    try:
        dto = asyncio.run(_load(order_id))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_draft(dto)
