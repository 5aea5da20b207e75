"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storeadmin.application.create_order import CreateOrderHandler
from storeadmin.application.dto import CustomerSpec, OrderDetailDTO, OrderItemSpec
from storeadmin.application.list_orders import ListOrdersHandler
from storeadmin.application.show_order import ShowOrderHandler
from storeadmin.application.update_order_status import UpdateOrderStatusHandler
from storeadmin.domain.exceptions import DomainException
from storeadmin.domain.model.order import OrderStatus, ShippingDetails
from storeadmin.infrastructure.bootstrap import (
    customer_repository,
    order_repository,
    product_repository,
)
from storeadmin.infrastructure.settings import get_settings

STATUS_CHOICES = [s.value for s in OrderStatus]


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'SKU-1:3,SKU-2:5' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'SKU:Quantity'."
            )
        sku, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for SKU '{sku}'."
            )
        specs.append(OrderItemSpec(sku=sku.strip(), quantity=qty))
    return specs


def _display_order(dto: OrderDetailDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_name}  {dto.email}  {dto.phone}".rstrip())
    click.echo(f"Placed:   {dto.ordered_at}")
    if dto.address or dto.city:
        click.echo(f"Ship to:  {dto.address}, {dto.city} ({dto.shipping_method})")
    click.echo()
    click.echo(f"  {'Product':<24} {'SKU':<12} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-'*69}")
    for item in dto.items:
        name = f"{item.product_name} ({item.details})" if item.details else item.product_name
        click.echo(
            f"  {name:<24} {item.sku:<12} {item.quantity:>5} {item.unit_price:>12} {item.line_total:>12}"
        )
    click.echo(f"  {'-'*69}")
    click.echo(f"  {'Subtotal':<43} {dto.subtotal:>25}")
    click.echo(f"  {'Discount':<43} {dto.discount:>25}")
    click.echo(f"  {'Shipping':<43} {dto.shipping:>25}")
    click.echo(f"  {'Order Total':<43} {dto.total:>25}")
    click.echo()
    click.echo("History:")
    for entry in dto.history:
        mark = "x" if entry.completed else " "
        click.echo(f"  [{mark}] {entry.date}  {entry.status}: {entry.description}")


@click.command("create")
@click.option("--first-name", required=True, help="Customer first name.")
@click.option("--last-name", default="", help="Customer last name.")
@click.option("--email", default="", help="Customer email.")
@click.option("--phone", default="", help="Customer phone / WhatsApp.")
@click.option("--items", required=True, help="Items as 'SKU:Qty,SKU:Qty'.")
@click.option("--discount", default="0", show_default=True, help="Discount amount.")
@click.option("--shipping-cost", default="0", show_default=True, help="Shipping cost.")
@click.option("--payment", "payment_method", default="", help="Payment method.")
@click.option("--address", default="", help="Shipping address.")
@click.option("--city", default="", help="Shipping city.")
def order_create(
    first_name: str,
    last_name: str,
    email: str,
    phone: str,
    items: str,
    discount: str,
    shipping_cost: str,
    payment_method: str,
    address: str,
    city: str,
) -> None:
    """Create a new order (takes the stock out)."""
    specs = _parse_items(items)
    handler = CreateOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        customer_repo=customer_repository(),
        tz=get_settings().tz,
    )

    try:
        dto = handler.handle(
            customer=CustomerSpec(first_name, last_name, email, phone),
            item_specs=specs,
            discount=discount,
            shipping_cost=shipping_cost,
            payment_method=payment_method,
            shipping=ShippingDetails(address=address, city=city),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} created.")
    _display_order(dto)


@click.command("show")
@click.argument("reference")
def order_show(reference: str) -> None:
    """Show an order by id, order number or '#number'."""
    handler = ShowOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        tz=get_settings().tz,
    )

    try:
        dto = handler.handle(reference)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--status", default="All", show_default=True,
              type=click.Choice(["All"] + STATUS_CHOICES, case_sensitive=False))
@click.option("--search", default=None, help="Match order number or customer name.")
@click.option("--limit", default=20, show_default=True, type=click.IntRange(min=1))
@click.option("--offset", default=0, show_default=True, type=click.IntRange(min=0))
def order_list(status: str, search: str | None, limit: int, offset: int) -> None:
    """List orders, newest first."""
    handler = ListOrdersHandler(order_repo=order_repository(), tz=get_settings().tz)

    try:
        page = handler.handle(status=status, search=search, limit=limit, offset=offset)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not page.orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Order':<10} {'Customer':<24} {'Date':<12} {'Total':>12}  Status")
    click.echo("-" * 72)
    for o in page.orders:
        click.echo(f"{o.order_number:<10} {o.customer:<24} {o.date:<12} {o.total:>12}  {o.status}")
    shown_to = offset + len(page.orders)
    click.echo(f"\nShowing {offset + 1}-{shown_to} of {page.total_count}")


@click.command("status")
@click.argument("reference")
@click.argument("new_status", type=click.Choice(STATUS_CHOICES, case_sensitive=False))
@click.option("--note", default=None, help="Description stored in the order history.")
def order_status(reference: str, new_status: str, note: str | None) -> None:
    """Change an order's status (cancelling restores stock)."""
    handler = UpdateOrderStatusHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
    )

    try:
        result = handler.handle(reference, new_status, note=note)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Order {result.order_number}: {result.previous_status} -> {result.new_status}"
    )
    if result.restock is not None:
        if result.restock.ok:
            click.echo(f"Stock restored for {len(result.restock.restocked)} line(s).")
        else:
            reason = result.restock.error or f"{len(result.restock.failed)} line(s) failed"
            click.echo(f"Warning: stock could not be fully restored ({reason}).", err=True)
    if not result.history_recorded:
        click.echo("Warning: the history entry could not be recorded.", err=True)
