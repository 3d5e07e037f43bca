"""Order aggregate and its line items.

An Order in ``CART`` status is the mutable, session-bound purchase that the
cart manager works on.  Once placed it leaves cart status and is only ever
referenced again through the session's order history.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from shopcart.domain.exceptions import ValidationError
from shopcart.domain.model.value_objects import Money


class OrderStatus(Enum):
    CART = "Cart"
    PLACED = "Placed"
    PAID = "Paid"
    ARCHIVED = "Archived"
    CANCELLED = "Cancelled"


@dataclass
class LineItem:
    """A quantity of one purchasable inside one order.

    The purchasable is referenced through ``relationship_field`` (e.g.
    ``product_id``); ``options`` holds the discriminating attributes the
    item was created with.  Record stores match line items on these.
    """

    id: int | None
    order_id: int | None
    item_type: str
    relationship_field: str
    purchasable_kind: str
    purchasable_id: str
    title: str
    unit_price: Money
    quantity: int = 0
    options: dict[str, object] = field(default_factory=dict)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity

    def value_of(self, field_name: str) -> object:
        """Return the value a filtered query sees for *field_name*."""
        if field_name == self.relationship_field:
            return self.purchasable_id
        if field_name in ("id", "order_id", "item_type"):
            return getattr(self, field_name)
        return self.options.get(field_name)

    def matches(self, criteria: Mapping[str, object]) -> bool:
        """Equality match over every field in *criteria*.

        A criterion of ``None`` only matches an unset option.
        """
        return all(self.value_of(name) == value for name, value in criteria.items())


@dataclass
class Order:
    """Aggregate root for a purchase, from cart through to placement.

    Use ``Order.start()`` for new carts.  The ``__init__`` stays simple so
    repositories can reconstitute persisted orders without re-validating.
    """

    id: int | None
    status: OrderStatus = OrderStatus.CART
    member_id: str | None = None
    items: list[LineItem] = field(default_factory=list)
    subtotal: Money = field(default_factory=Money.zero)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    placed_at: datetime | None = None

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def start(member_id: str | None = None) -> Order:
        """Start a new, empty cart-status order."""
        return Order(id=None, status=OrderStatus.CART, member_id=member_id)

    # --- Queries --------------------------------------------------------------

    @property
    def is_cart(self) -> bool:
        return self.status == OrderStatus.CART

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    def matches(self, criteria: Mapping[str, object]) -> bool:
        return all(getattr(self, name, None) == value for name, value in criteria.items())

    # --- Line item collection -------------------------------------------------

    def attach(self, item: LineItem) -> None:
        """Add *item* to the collection, replacing a stale copy of the same row."""
        for index, existing in enumerate(self.items):
            if existing is item:
                return
            if item.id is not None and existing.id == item.id:
                self.items[index] = item
                return
        self.items.append(item)

    def detach(self, item: LineItem) -> None:
        self.items = [
            existing
            for existing in self.items
            if existing is not item and (item.id is None or existing.id != item.id)
        ]

    # --- Calculation ----------------------------------------------------------

    def calculate(self) -> Money:
        """Recompute the subtotal from the current line items."""
        subtotal = Money.zero()
        for item in self.items:
            subtotal = subtotal + item.line_total
        self.subtotal = subtotal
        return subtotal

    # --- State transitions ----------------------------------------------------

    def place(self) -> None:
        """Transition CART -> PLACED.

        After this the order is never bound as a session's cart again.
        """
        if not self.is_cart:
            raise ValidationError(
                f"Cannot place order: current status is {self.status.value}, "
                f"expected Cart"
            )
        if not self.items:
            raise ValidationError("Cannot place an empty cart")
        self.calculate()
        self.status = OrderStatus.PLACED
        self.placed_at = datetime.now(timezone.utc)
