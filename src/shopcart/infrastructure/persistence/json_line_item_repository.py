"""JSON-file-backed implementation of LineItemRepository."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from shopcart.domain.model.order import LineItem
from shopcart.domain.model.value_objects import Money
from shopcart.domain.repository.line_item_repository import LineItemRepository
from shopcart.infrastructure.persistence.json_file import JsonFile


class JsonLineItemRepository(LineItemRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- LineItemRepository interface -----------------------------------------

    def find_first(self, criteria: Mapping[str, object]) -> LineItem | None:
        for raw in self._file.load():
            item = self._to_domain(raw)
            if item.matches(criteria):
                return item
        return None

    def list_for_order(self, order_id: int) -> list[LineItem]:
        return [
            self._to_domain(raw)
            for raw in self._file.load()
            if raw["order_id"] == order_id
        ]

    def save(self, item: LineItem) -> None:
        records = self._file.load()

        if item.id is None:
            item.id = max((r["id"] for r in records), default=0) + 1

        for i, raw in enumerate(records):
            if raw["id"] == item.id:
                records[i] = self._to_raw(item)
                break
        else:
            records.append(self._to_raw(item))

        self._file.persist(records)

    def delete(self, item: LineItem) -> None:
        records = [raw for raw in self._file.load() if raw["id"] != item.id]
        self._file.persist(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(item: LineItem) -> dict:
        return {
            "id": item.id,
            "order_id": item.order_id,
            "item_type": item.item_type,
            "relationship_field": item.relationship_field,
            "purchasable_kind": item.purchasable_kind,
            "purchasable_id": item.purchasable_id,
            "title": item.title,
            "unit_price": str(item.unit_price.amount),
            "currency": item.unit_price.currency,
            "quantity": item.quantity,
            "options": item.options,
        }

    @staticmethod
    def _to_domain(raw: dict) -> LineItem:
        return LineItem(
            id=raw["id"],
            order_id=raw["order_id"],
            item_type=raw["item_type"],
            relationship_field=raw["relationship_field"],
            purchasable_kind=raw["purchasable_kind"],
            purchasable_id=raw["purchasable_id"],
            title=raw["title"],
            unit_price=Money.of(raw["unit_price"], raw.get("currency", "USD")),
            quantity=raw["quantity"],
            options=dict(raw.get("options", {})),
        )
