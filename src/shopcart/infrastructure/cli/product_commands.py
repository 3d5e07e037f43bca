"""CLI commands for the product catalogue."""

from __future__ import annotations

import click

from shopcart.application.add_product import AddProductHandler
from shopcart.domain.exceptions import DomainException
from shopcart.infrastructure.bootstrap import product_repository


def _parse_variations(raw: tuple[str, ...]) -> list[tuple[str, str]]:
    """Parse ('Small:9.99', 'Large:12.50') into [(name, price), ...]."""
    variations: list[tuple[str, str]] = []
    for pair in raw:
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid variation '{pair}'. Expected 'Name:Price'."
            )
        name, price = pair.rsplit(":", 1)
        variations.append((name, price))
    return variations


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--variation", "variations", multiple=True, help="Variation as 'Name:Price' (repeatable).")
def product_add(name: str, price: str, variations: tuple[str, ...]) -> None:
    """Add a new product to the catalogue."""
    handler = AddProductHandler(product_repo=product_repository())

    try:
        product = handler.handle(name=name, price=price, variations=_parse_variations(variations))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added at {product.price}")
    for variation in product.variations:
        click.echo(f"  variation {variation.id} '{variation.name}' at {variation.price}")


@click.command("list")
def product_list() -> None:
    """List all products in the catalogue."""
    repo = product_repository()
    products = repo.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<8} {'Name':<30} {'Price':>10}")
    click.echo("-" * 50)
    for p in products:
        click.echo(f"{p.id:<8} {p.name:<30} {str(p.price):>10}")
        for v in p.variations:
            click.echo(f"{v.id:<8}   {v.name:<28} {str(v.price):>10}")
