"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from storeadmin.application.add_product import AddProductHandler, VariantSpec
from storeadmin.application.delete_product import DeleteProductHandler
from storeadmin.application.list_products import ListProductsHandler
from storeadmin.application.update_product import UpdateProductHandler
from storeadmin.domain.exceptions import DomainException
from storeadmin.domain.model.product import ProductStatus
from storeadmin.infrastructure.bootstrap import category_repository, product_repository

STATUS_CHOICES = [s.value for s in ProductStatus]


def _parse_variant(raw: str) -> VariantSpec:
    """Parse 'SKU:stock[:key=value;key=value]' into a VariantSpec."""
    parts = raw.split(":", 2)
    if len(parts) < 2:
        raise click.BadParameter(f"Invalid variant '{raw}'. Expected 'SKU:stock[:Size=M;Color=Red]'.")
    try:
        stock = int(parts[1])
    except ValueError:
        raise click.BadParameter(f"Invalid stock '{parts[1]}' for variant '{parts[0]}'.")
    attributes: dict[str, str] = {}
    if len(parts) == 3 and parts[2]:
        for pair in parts[2].split(";"):
            key, _, value = pair.partition("=")
            attributes[key.strip()] = value.strip()
    return VariantSpec(sku=parts[0].strip(), stock=stock, attributes=attributes)


@click.command("add")
@click.option("--sku", required=True, help="Unique SKU.")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--stock", default=0, show_default=True, type=click.IntRange(min=0))
@click.option("--status", default="Active", show_default=True,
              type=click.Choice(STATUS_CHOICES, case_sensitive=False))
@click.option("--category", "category_id", default=None, help="Category ID.")
@click.option("--variant", "variants", multiple=True,
              help="Variant as 'SKU:stock[:Size=M;Color=Red]'; repeatable.")
def product_add(
    sku: str,
    name: str,
    price: str,
    stock: int,
    status: str,
    category_id: str | None,
    variants: tuple[str, ...],
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(
        product_repo=product_repository(), category_repo=category_repository()
    )

    try:
        product = handler.handle(
            sku=sku,
            name=name,
            price=price,
            stock=stock,
            status=status,
            category_id=category_id,
            variants=[_parse_variant(v) for v in variants],
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.sku} '{product.name}' added at {product.price} (id {product.id})")


@click.command("list")
@click.option("--search", default=None, help="Match name or SKU.")
@click.option("--category", "category_id", default=None, help="Category ID.")
@click.option("--status", default=None, type=click.Choice(STATUS_CHOICES, case_sensitive=False))
def product_list(search: str | None, category_id: str | None, status: str | None) -> None:
    """List products in the catalog."""
    handler = ListProductsHandler(product_repo=product_repository())

    try:
        products = handler.handle(search=search, category_id=category_id, status=status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'SKU':<14} {'Name':<24} {'Price':>12} {'Stock':>6}  {'Status':<9} ID")
    click.echo("-" * 100)
    for p in products:
        click.echo(f"{p.sku:<14} {p.name:<24} {p.price:>12} {p.stock:>6}  {p.status:<9} {p.id}")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--stock", default=None, type=click.IntRange(min=0), help="New stock level.")
@click.option("--status", default=None, type=click.Choice(STATUS_CHOICES, case_sensitive=False))
@click.option("--category", "category_id", default=None, help="Category ID ('' to clear).")
def product_update(
    product_id: str,
    name: str | None,
    price: str | None,
    stock: int | None,
    status: str | None,
    category_id: str | None,
) -> None:
    """Update a product's name, price, stock, status or category."""
    handler = UpdateProductHandler(
        product_repo=product_repository(), category_repo=category_repository()
    )

    try:
        product = handler.handle(
            product_id=product_id,
            name=name,
            price=price,
            stock=stock,
            status=status,
            category_id=category_id,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.sku} updated: {product.price}, stock {product.stock}, {product.status.value}")


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.confirmation_option(prompt="Delete this product and its variants?")
def product_delete(product_id: str) -> None:
    """Delete a product and its variants."""
    handler = DeleteProductHandler(product_repo=product_repository())

    try:
        handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} deleted.")
