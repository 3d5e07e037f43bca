"""Application service: Place Order use case.

Stands in for the external checkout: moves the session's cart out of cart
status, then hands the session over so the next add starts a fresh cart
and the placed order shows up in the session history.
"""

from __future__ import annotations

from shopcart.application.cart import ShoppingCart
from shopcart.application.dto import PlacedOrderDTO
from shopcart.domain.exceptions import NoOrderError
from shopcart.domain.repository.order_repository import OrderRepository


class PlaceOrderHandler:

    def __init__(self, cart: ShoppingCart, order_repo: OrderRepository) -> None:
        self._cart = cart
        self._order_repo = order_repo

    def handle(self) -> PlacedOrderDTO:
        order = self._cart.current()
        if order is None:
            raise NoOrderError("No current order.")

        order.place()
        self._order_repo.save(order)
        self._cart.archive_current_session(order.id)

        return PlacedOrderDTO(
            order_id=order.id,  # type: ignore[arg-type]
            item_count=order.total_quantity,
            subtotal=str(order.subtotal),
            placed_at=order.placed_at.strftime("%Y-%m-%d %H:%M UTC"),  # type: ignore[union-attr]
        )
