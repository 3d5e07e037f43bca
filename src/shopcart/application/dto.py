"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CartLineDTO:
    """Output: a single line item as displayed to the user."""

    item_id: int
    title: str
    options: str  # formatted, e.g. "color=red, size=M"
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class CartDTO:
    """Output: a whole cart as displayed to the user."""

    order_id: int
    status: str
    member_id: str | None
    items: list[CartLineDTO]
    total_quantity: int
    subtotal: str


@dataclass(frozen=True)
class PlacedOrderDTO:
    order_id: int
    item_count: int
    subtotal: str
    placed_at: str
