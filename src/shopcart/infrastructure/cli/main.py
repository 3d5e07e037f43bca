import click

from shopcart.infrastructure.cli.cart_commands import (
    bind_cart_session,
    cart_add,
    cart_clear,
    cart_history,
    cart_place,
    cart_remove,
    cart_remove_all,
    cart_set_quantity,
    cart_show,
)
from shopcart.infrastructure.cli.product_commands import product_add, product_list
from shopcart.infrastructure.log_config import configure_logging


@click.group()
def cli() -> None:
    """shopcart — session-bound shopping cart"""
    configure_logging()


@cli.group()
@click.option("--session", default="default", envvar="SHOPCART_SESSION", show_default=True, help="Client session ID.")
@click.option("--actor", default=None, envvar="SHOPCART_ACTOR", help="Signed-in member ID.")
@click.pass_context
def cart(ctx: click.Context, session: str, actor: str | None) -> None:
    """Manage the session's cart."""
    bind_cart_session(ctx, session, actor)


@cli.group()
def product() -> None:
    """Manage products."""


# Register subcommands
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_history)
cart.add_command(cart_place)
cart.add_command(cart_remove)
cart.add_command(cart_remove_all)
cart.add_command(cart_set_quantity)
cart.add_command(cart_show)
product.add_command(product_add)
product.add_command(product_list)
