"""Application service: Show Cart use case (query)."""

from __future__ import annotations

from shopcart.application.cart import ShoppingCart
from shopcart.application.dto import CartDTO, CartLineDTO
from shopcart.domain.model.order import LineItem, Order


class ShowCartHandler:

    def __init__(self, cart: ShoppingCart) -> None:
        self._cart = cart

    def handle(self) -> CartDTO | None:
        """Return the session's cart, or None if nothing has been added yet."""
        order = self._cart.current()
        if order is None:
            return None
        return self._to_dto(order)

    @staticmethod
    def _format_options(item: LineItem) -> str:
        return ", ".join(f"{name}={value}" for name, value in sorted(item.options.items()))

    @classmethod
    def _to_dto(cls, order: Order) -> CartDTO:
        return CartDTO(
            order_id=order.id,  # type: ignore[arg-type]
            status=order.status.value,
            member_id=order.member_id,
            items=[
                CartLineDTO(
                    item_id=item.id,  # type: ignore[arg-type]
                    title=item.title,
                    options=cls._format_options(item),
                    quantity=item.quantity,
                    unit_price=str(item.unit_price),
                    line_total=str(item.line_total),
                )
                for item in order.items
            ],
            total_quantity=order.total_quantity,
            subtotal=str(order.subtotal),
        )
