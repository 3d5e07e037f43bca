"""Purchasable entities and the capability table that describes them.

A purchasable is anything that can be put in a cart: a plain product or
one concrete variation of a product.  How a purchasable turns into a line
item (which item type, which relationship field, which options take part
in matching) is not looked up on the class at runtime; it comes from a
``CapabilityTable`` built when the application is composed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import ClassVar

from shopcart.domain.exceptions import EntityNotFoundError
from shopcart.domain.model.order import LineItem
from shopcart.domain.model.value_objects import Money


@dataclass(frozen=True)
class ItemClass:
    """How line items for one kind of purchasable are stored and matched."""

    item_type: str
    relationship_field: str
    required_fields: tuple[str, ...] = ()

    def restrict(self, filters: Mapping[str, object]) -> dict[str, object]:
        """Keep only the caller-supplied fields this item class matches on."""
        return {
            name: filters[name]
            for name in self.required_fields
            if filters.get(name) is not None
        }


class CapabilityTable:
    """Maps a purchasable kind tag to its ``ItemClass``."""

    def __init__(self, entries: Mapping[str, ItemClass]) -> None:
        self._entries = dict(entries)

    def item_class_for(self, purchasable: Purchasable) -> ItemClass:
        try:
            return self._entries[purchasable.kind]
        except KeyError:
            raise EntityNotFoundError(
                f"No line item class configured for '{purchasable.kind}'"
            ) from None

    def with_entry(self, kind: str, item_class: ItemClass) -> CapabilityTable:
        return CapabilityTable({**self._entries, kind: item_class})


class Purchasable(ABC):
    """Contract every cart-able entity fulfils."""

    kind: ClassVar[str]

    id: str
    price: Money

    @property
    @abstractmethod
    def title(self) -> str:
        """Human-readable name copied onto line items."""

    @abstractmethod
    def check_purchasable(self, actor: str | None = None, quantity: int = 1) -> bool:
        """Return True if *actor* may buy *quantity* of this entity."""

    def variants(self) -> list[Purchasable]:
        """Concrete sub-variants that should be transacted instead of this one."""
        return []

    def create_line_item(
        self,
        item_class: ItemClass,
        quantity: int,
        filters: Mapping[str, object] | None = None,
    ) -> LineItem:
        """Build a new, unsaved line item for this purchasable."""
        return LineItem(
            id=None,
            order_id=None,
            item_type=item_class.item_type,
            relationship_field=item_class.relationship_field,
            purchasable_kind=self.kind,
            purchasable_id=self.id,
            title=self.title,
            unit_price=self.price,
            quantity=quantity,
            options=item_class.restrict(filters or {}),
        )


@dataclass
class ProductVariation(Purchasable):
    """One concrete variant (size, colour, ...) of a product."""

    kind: ClassVar[str] = "variation"

    id: str
    product_id: str
    product_name: str
    name: str
    price: Money
    allow_purchase: bool = True

    @property
    def title(self) -> str:
        return f"{self.product_name} ({self.name})"

    def check_purchasable(self, actor: str | None = None, quantity: int = 1) -> bool:
        return self.allow_purchase and quantity > 0 and not self.price.is_zero


@dataclass
class Product(Purchasable):
    """A catalogue product.

    A product that has variations is never transacted itself; one of its
    variations is put in the cart instead.
    """

    kind: ClassVar[str] = "product"

    id: str
    name: str
    price: Money
    allow_purchase: bool = True
    variations: list[ProductVariation] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.name

    def check_purchasable(self, actor: str | None = None, quantity: int = 1) -> bool:
        if self.variations:
            return False
        return self.allow_purchase and quantity > 0 and not self.price.is_zero

    def variants(self) -> list[Purchasable]:
        return list(self.variations)

    def add_variation(self, name: str, price: Money) -> ProductVariation:
        variation = ProductVariation(
            id=f"{self.id}-{len(self.variations) + 1}",
            product_id=self.id,
            product_name=self.name,
            name=name,
            price=price,
        )
        self.variations.append(variation)
        return variation


DEFAULT_CAPABILITIES = CapabilityTable(
    {
        Product.kind: ItemClass(
            item_type="product_item",
            relationship_field="product_id",
            required_fields=("color", "size"),
        ),
        ProductVariation.kind: ItemClass(
            item_type="variation_item",
            relationship_field="variation_id",
        ),
    }
)
