"""CLI commands for the Customer aggregate."""

from __future__ import annotations

import click

from storeadmin.application.create_customer import CreateCustomerHandler, ListCustomersHandler
from storeadmin.application.dto import CustomerSpec
from storeadmin.domain.exceptions import DomainException
from storeadmin.infrastructure.bootstrap import customer_repository


@click.command("add")
@click.option("--first-name", required=True, help="First name.")
@click.option("--last-name", default="", help="Last name.")
@click.option("--email", default="", help="Email.")
@click.option("--phone", default="", help="Phone / WhatsApp.")
@click.option("--region", default="", help="Region or department.")
def customer_add(first_name: str, last_name: str, email: str, phone: str, region: str) -> None:
    """Register a customer."""
    handler = CreateCustomerHandler(customer_repo=customer_repository())

    try:
        customer = handler.handle(CustomerSpec(first_name, last_name, email, phone, region))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Customer '{customer.full_name}' added (id {customer.id})")


@click.command("list")
@click.option("--search", default=None, help="Match name, email or phone.")
def customer_list(search: str | None) -> None:
    """List customers, newest first."""
    handler = ListCustomersHandler(customer_repo=customer_repository())

    try:
        customers = handler.handle(search=search)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not customers:
        click.echo("No customers found.")
        return

    click.echo(f"{'Name':<24} {'Email':<28} {'Phone':<14} ID")
    click.echo("-" * 104)
    for c in customers:
        click.echo(f"{c.full_name:<24} {c.email:<28} {c.phone:<14} {c.id}")
