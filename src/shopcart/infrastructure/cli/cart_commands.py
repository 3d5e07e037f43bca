"""CLI commands for the session's shopping cart.

This is the thin dispatch layer: it turns command line arguments into a
purchasable and options, calls the cart manager and renders the message
the manager left behind.
"""

from __future__ import annotations

import click

from shopcart.application.cart import ShoppingCart
from shopcart.application.place_order import PlaceOrderHandler
from shopcart.application.show_cart import ShowCartHandler
from shopcart.domain.exceptions import DomainException
from shopcart.domain.model.purchasable import Purchasable
from shopcart.infrastructure.bootstrap import (
    order_repository,
    product_repository,
    shopping_cart,
)
from shopcart.infrastructure.log_config import bind_session


def _parse_options(raw: tuple[str, ...]) -> dict[str, str]:
    """Parse ('color=red', 'size=M') into {'color': 'red', 'size': 'M'}."""
    options: dict[str, str] = {}
    for pair in raw:
        if "=" not in pair:
            raise click.BadParameter(
                f"Invalid option '{pair}'. Expected 'name=value'."
            )
        name, value = pair.split("=", 1)
        options[name.strip()] = value.strip()
    return options


def _purchasable_from_args(
    cart: ShoppingCart, product_id: str, variation_id: str | None
) -> Purchasable | None:
    """Look the purchasable up and canonicalize it, or None if unknown."""
    repo = product_repository()
    if variation_id is not None:
        variation = repo.get_variation(variation_id)
        if variation is None or variation.product_id != product_id:
            return None
        return variation
    product = repo.get_by_id(product_id)
    if product is None:
        return None
    return cart.resolve(product)


def _report(cart: ShoppingCart) -> None:
    """Echo the manager's message, failing the command if it was bad."""
    result = cart.last_result
    if result is None:
        return
    if not result.ok:
        raise click.ClickException(result.message)
    click.echo(result.message)


_product_option = click.option("--product", "product_id", required=True, help="Product ID.")
_variation_option = click.option("--variation", "variation_id", default=None, help="Variation ID.")
_options_option = click.option(
    "--option", "options", multiple=True, help="Item option as 'name=value' (repeatable)."
)


@click.command("add")
@_product_option
@_variation_option
@click.option("--quantity", default=1, type=int, show_default=True, help="Units to add.")
@_options_option
@click.pass_obj
def cart_add(obj: dict, product_id: str, variation_id: str | None, quantity: int, options: tuple[str, ...]) -> None:
    """Add units of a product to the cart."""
    cart = shopping_cart(obj["session"], obj["actor"])
    purchasable = _purchasable_from_args(cart, product_id, variation_id)
    cart.add(purchasable, quantity, _parse_options(options))
    _report(cart)


@click.command("remove")
@_product_option
@_variation_option
@click.option("--quantity", default=1, type=int, show_default=True, help="Units to remove.")
@_options_option
@click.pass_obj
def cart_remove(obj: dict, product_id: str, variation_id: str | None, quantity: int, options: tuple[str, ...]) -> None:
    """Remove some units of a product from the cart."""
    cart = shopping_cart(obj["session"], obj["actor"])
    purchasable = _purchasable_from_args(cart, product_id, variation_id)
    cart.remove(purchasable, quantity, _parse_options(options))
    _report(cart)


@click.command("remove-all")
@_product_option
@_variation_option
@_options_option
@click.pass_obj
def cart_remove_all(obj: dict, product_id: str, variation_id: str | None, options: tuple[str, ...]) -> None:
    """Remove a product from the cart entirely."""
    cart = shopping_cart(obj["session"], obj["actor"])
    purchasable = _purchasable_from_args(cart, product_id, variation_id)
    cart.remove(purchasable, None, _parse_options(options))
    _report(cart)


@click.command("set-quantity")
@_product_option
@_variation_option
@click.option("--quantity", required=True, type=int, help="New quantity (0 removes the item).")
@_options_option
@click.pass_obj
def cart_set_quantity(obj: dict, product_id: str, variation_id: str | None, quantity: int, options: tuple[str, ...]) -> None:
    """Set the quantity of a product in the cart."""
    cart = shopping_cart(obj["session"], obj["actor"])
    purchasable = _purchasable_from_args(cart, product_id, variation_id)
    cart.set_quantity(purchasable, quantity, _parse_options(options))
    _report(cart)


@click.command("clear")
@click.pass_obj
def cart_clear(obj: dict) -> None:
    """Abandon the current cart."""
    cart = shopping_cart(obj["session"], obj["actor"])
    cart.clear()
    _report(cart)


@click.command("show")
@click.pass_obj
def cart_show(obj: dict) -> None:
    """Show the contents of the current cart."""
    cart = shopping_cart(obj["session"], obj["actor"])
    dto = ShowCartHandler(cart).handle()

    if dto is None:
        click.echo("Cart has not been created yet. Add a product.")
        return

    click.echo(f"Cart #{dto.order_id}  (status={dto.status})")
    if dto.member_id:
        click.echo(f"Member: {dto.member_id}")
    click.echo()
    click.echo(f"  {'Item':<30} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*57}")
    for item in dto.items:
        title = f"{item.title} [{item.options}]" if item.options else item.title
        click.echo(
            f"  {title:<30} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*57}")
    click.echo(f"  {'Subtotal':<30} {dto.total_quantity:>5} {dto.subtotal:>21}")


@click.command("place")
@click.pass_obj
def cart_place(obj: dict) -> None:
    """Place the current cart as an order."""
    cart = shopping_cart(obj["session"], obj["actor"])
    handler = PlaceOrderHandler(cart, order_repository())

    try:
        dto = handler.handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.order_id} placed at {dto.placed_at} — {dto.item_count} item(s), {dto.subtotal}")


@click.command("history")
@click.pass_obj
def cart_history(obj: dict) -> None:
    """List orders placed in this session."""
    cart = shopping_cart(obj["session"], obj["actor"])
    order_ids = cart.order_history()

    if not order_ids:
        click.echo("No orders placed in this session.")
        return

    for order_id in order_ids:
        click.echo(f"Order #{order_id}")


def bind_cart_session(ctx: click.Context, session: str, actor: str | None) -> None:
    ctx.obj = {"session": session, "actor": actor}
    bind_session(session, actor)
