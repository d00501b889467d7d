"""CLI commands for the Product entity."""

from __future__ import annotations

import click

from catalog.application.product_service import ProductService
from catalog.domain.exceptions import DomainException
from catalog.domain.model.product import Product
from catalog.infrastructure.bootstrap import admin_service


def _service() -> ProductService:
    try:
        return admin_service()
    except DomainException as exc:
        raise click.ClickException(str(exc))


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--sku", required=True, help="Stock keeping unit.")
@click.option("--price", required=True, type=float, help="Price (e.g. 15.00).")
@click.option("--description", default="", help="Free-text description.")
@click.option("--image", default="", help="Image URI.")
def product_add(name: str, sku: str, price: float, description: str, image: str) -> None:
    """Add a new product to the catalog."""
    service = _service()

    try:
        product = Product(name=name, sku=sku, price=price, description=description, image=image)
        product_id = service.create_product(product)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} '{name}' added at {price:.2f}")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    service = _service()

    try:
        products = service.get_all_products()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'SKU':<16} {'Name':<24} {'Price':>10}")
    click.echo("-" * 59)
    for p in products:
        click.echo(f"{p.id:<6} {p.sku:<16} {p.name:<24} {p.price:>10.2f}")


@click.command("show")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
def product_show(product_id: int) -> None:
    """Show a single product."""
    service = _service()

    try:
        p = service.get_product_by_id(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{p.id}")
    click.echo(f"  Name:        {p.name}")
    click.echo(f"  SKU:         {p.sku}")
    click.echo(f"  Price:       {p.price:.2f}")
    click.echo(f"  Description: {p.description}")
    click.echo(f"  Image:       {p.image}")
    if p.created_at is not None:
        click.echo(f"  Created:     {p.created_at:%Y-%m-%d %H:%M}")
    if p.updated_at is not None:
        click.echo(f"  Updated:     {p.updated_at:%Y-%m-%d %H:%M}")


@click.command("update")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--sku", default=None, help="New SKU.")
@click.option("--price", default=None, type=float, help="New price.")
@click.option("--description", default=None, help="New description.")
@click.option("--image", default=None, help="New image URI.")
def product_update(
    product_id: int,
    name: str | None,
    sku: str | None,
    price: float | None,
    description: str | None,
    image: str | None,
) -> None:
    """Update some fields of an existing product."""
    service = _service()

    try:
        product = service.get_product_by_id(product_id)
        if name is not None:
            product.name = name
        if sku is not None:
            product.sku = sku
        if price is not None:
            product.price = price
        if description is not None:
            product.description = description
        if image is not None:
            product.image = image
        service.update_product(product)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} updated")


@click.command("delete")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
def product_delete(product_id: int) -> None:
    """Remove a product from the catalog (soft delete)."""
    service = _service()

    try:
        service.delete_product_by_id(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} deleted")
