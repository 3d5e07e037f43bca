"""Domain service: session order history.

When a session's bound order has left cart status it is recorded in the
session's history so the customer can still look it up.  Recording is
idempotent per order ID.
"""

from __future__ import annotations

from shopcart.domain.exceptions import ValidationError
from shopcart.domain.model.order import Order
from shopcart.domain.repository.session_store import SessionStore

DEFAULT_HISTORY_KEY = "shoppingcart.orders"


class ArchivalCoordinator:

    def __init__(self, session: SessionStore, history_key: str = DEFAULT_HISTORY_KEY) -> None:
        self._session = session
        self._history_key = history_key

    def order_ids(self) -> list[int]:
        return list(self._session.get(self._history_key) or [])

    def record(self, order: Order) -> bool:
        """Append *order* to the session history.

        Returns False if the order was already recorded.
        """
        if order.id is None:
            raise ValidationError("Cannot archive an order that was never saved")
        if order.is_cart:
            raise ValidationError(f"Order #{order.id} is still a cart")

        history = self.order_ids()
        if order.id in history:
            return False
        history.append(order.id)
        self._session.set(self._history_key, history)
        return True
