"""CLI commands for the Category aggregate."""

from __future__ import annotations

import click

from storeadmin.application.manage_categories import (
    AddCategoryHandler,
    DeleteCategoryHandler,
    UpdateCategoryHandler,
)
from storeadmin.domain.exceptions import DomainException
from storeadmin.infrastructure.bootstrap import category_repository, product_repository
from storeadmin.infrastructure.cli._images import upload_file

IMAGE_FILE = click.Path(exists=True, dir_okay=False)


@click.command("list")
def category_list() -> None:
    """List categories."""
    try:
        categories = category_repository().list_all()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not categories:
        click.echo("No categories found.")
        return

    click.echo(f"{'Name':<24} {'Slug':<24} ID")
    click.echo("-" * 86)
    for c in categories:
        click.echo(f"{c.name:<24} {c.slug:<24} {c.id}")


@click.command("add")
@click.option("--name", required=True, help="Category name.")
@click.option("--description", default="", help="Short description.")
@click.option("--image", "image_path", default=None, type=IMAGE_FILE, help="Image file to upload.")
def category_add(name: str, description: str, image_path: str | None) -> None:
    """Add a category, optionally with an image."""
    handler = AddCategoryHandler(category_repo=category_repository())

    try:
        image_url = upload_file(image_path, "categories") if image_path else None
        category = handler.handle(name=name, description=description, image_url=image_url)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category '{category.name}' added (id {category.id})")


@click.command("update")
@click.option("--id", "category_id", required=True, help="Category ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--description", default=None, help="New description.")
@click.option("--image", "image_path", default=None, type=IMAGE_FILE, help="Replacement image.")
def category_update(
    category_id: str,
    name: str | None,
    description: str | None,
    image_path: str | None,
) -> None:
    """Rename a category or replace its description or image."""
    handler = UpdateCategoryHandler(category_repo=category_repository())

    try:
        image_url = upload_file(image_path, "categories") if image_path else None
        category = handler.handle(
            category_id, name=name, description=description, image_url=image_url
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category '{category.name}' updated.")


@click.command("delete")
@click.option("--id", "category_id", required=True, help="Category ID.")
@click.confirmation_option(prompt="Delete this category?")
def category_delete(category_id: str) -> None:
    """Delete a category; its products become uncategorized."""
    handler = DeleteCategoryHandler(
        category_repo=category_repository(), product_repo=product_repository()
    )

    try:
        detached = handler.handle(category_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category deleted; {detached} product(s) now uncategorized.")
