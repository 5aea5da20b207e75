"""CLI commands for the store configuration."""

from __future__ import annotations

import click

from storeadmin.application.store_config import ShowStoreConfigHandler, UpdateStoreConfigHandler
from storeadmin.domain.exceptions import DomainException
from storeadmin.infrastructure.bootstrap import store_config_repository
from storeadmin.infrastructure.cli._images import upload_file


@click.command("show")
def config_show() -> None:
    """Show the store name and logo."""
    try:
        config = ShowStoreConfigHandler(config_repo=store_config_repository()).handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Store name: {config.store_name}")
    click.echo(f"Logo:       {config.logo_url or '(none)'}")


@click.command("set")
@click.option("--name", "store_name", default=None, help="Store name.")
@click.option("--logo", "logo_path", default=None, type=click.Path(exists=True, dir_okay=False),
              help="Logo image (JPG, PNG, WEBP or GIF, max 5MB).")
def config_set(store_name: str | None, logo_path: str | None) -> None:
    """Change the store name and/or logo."""
    if store_name is None and logo_path is None:
        raise click.UsageError("Nothing to change: pass --name and/or --logo.")

    handler = UpdateStoreConfigHandler(config_repo=store_config_repository())
    try:
        logo_url = upload_file(logo_path, "store/logo") if logo_path else None
        config = handler.handle(store_name=store_name, logo_url=logo_url)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Configuration saved: {config.store_name}")
