"""Abstract repository for line items.

Line items are stored apart from their order and found by filtered
queries, so two requests for the same session see the same rows.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

from shopcart.domain.model.order import LineItem


class LineItemRepository(ABC):

    @abstractmethod
    def find_first(self, criteria: Mapping[str, object]) -> LineItem | None:
        """Return the first line item matching every value in *criteria*."""

    @abstractmethod
    def list_for_order(self, order_id: int) -> list[LineItem]:
        """Return an order's line items in insertion order."""

    @abstractmethod
    def save(self, item: LineItem) -> None:
        """Persist a new or updated line item, assigning an ID if it has none."""

    @abstractmethod
    def delete(self, item: LineItem) -> None:
        """Remove a line item permanently."""
