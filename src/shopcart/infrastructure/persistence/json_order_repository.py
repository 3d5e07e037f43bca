"""JSON-file-backed implementation of OrderRepository.

Only the order row is stored here; its line items live in the line item
store and are loaded by the cart manager.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

from shopcart.domain.model.order import Order, OrderStatus
from shopcart.domain.model.value_objects import Money
from shopcart.domain.repository.order_repository import OrderRepository
from shopcart.infrastructure.persistence.json_file import JsonFile


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        return self.find_first({"id": order_id})

    def find_first(self, criteria: Mapping[str, object]) -> Order | None:
        for raw in self._file.load():
            order = self._to_domain(raw)
            if order.matches(criteria):
                return order
        return None

    def save(self, order: Order) -> None:
        orders = self._file.load()

        if order.id is None:
            order.id = max((o["id"] for o in orders), default=0) + 1

        # Upsert: replace if exists, otherwise append
        for i, raw in enumerate(orders):
            if raw["id"] == order.id:
                orders[i] = self._to_raw(order)
                break
        else:
            orders.append(self._to_raw(order))

        self._file.persist(orders)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "status": order.status.value,
            "member_id": order.member_id,
            "subtotal": str(order.subtotal.amount),
            "currency": order.subtotal.currency,
            "created_at": order.created_at.isoformat(),
            "placed_at": order.placed_at.isoformat() if order.placed_at else None,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        return Order(
            id=raw["id"],
            status=OrderStatus(raw["status"]),
            member_id=raw.get("member_id"),
            subtotal=Money.of(raw.get("subtotal", "0.00"), raw.get("currency", "USD")),
            created_at=datetime.fromisoformat(raw["created_at"]),
            placed_at=(
                datetime.fromisoformat(raw["placed_at"]) if raw.get("placed_at") else None
            ),
        )
