"""Domain service: find-or-make of line items inside a cart.

Matching is what keeps a cart consistent across repeated adds: the same
purchasable with the same discriminating options always resolves to the
same line item, while different options produce separate items.
"""

from __future__ import annotations

from collections.abc import Mapping

from shopcart.domain.exceptions import EntityNotFoundError, NotPurchasableError
from shopcart.domain.model.order import LineItem, Order
from shopcart.domain.model.purchasable import CapabilityTable, Purchasable
from shopcart.domain.repository.line_item_repository import LineItemRepository
from shopcart.domain.service.purchasable_resolver import PurchasableResolver


class LineItemReconciler:

    def __init__(
        self,
        item_repo: LineItemRepository,
        capabilities: CapabilityTable,
        resolver: PurchasableResolver | None = None,
    ) -> None:
        self._item_repo = item_repo
        self._capabilities = capabilities
        self._resolver = resolver or PurchasableResolver()

    def match_criteria(
        self,
        order: Order,
        purchasable: Purchasable,
        filters: Mapping[str, object] | None = None,
    ) -> dict[str, object]:
        """Build the equality predicate identifying a line item.

        Combines the order ID, the relationship field for the purchasable
        and every required field of the item class.  A required field the
        caller did not supply matches only items without that option.
        """
        item_class = self._capabilities.item_class_for(purchasable)
        supplied = item_class.restrict(filters or {})
        criteria: dict[str, object] = {
            name: supplied.get(name) for name in item_class.required_fields
        }
        criteria["order_id"] = order.id
        criteria["item_type"] = item_class.item_type
        criteria[item_class.relationship_field] = purchasable.id
        return criteria

    def find(
        self,
        order: Order,
        purchasable: Purchasable,
        filters: Mapping[str, object] | None = None,
        actor: str | None = None,
    ) -> LineItem | None:
        canonical = self._resolver.resolve(purchasable, actor)
        return self._item_repo.find_first(self.match_criteria(order, canonical, filters))

    def get(
        self,
        order: Order,
        purchasable: Purchasable | None,
        filters: Mapping[str, object] | None = None,
        actor: str | None = None,
    ) -> LineItem:
        """Like ``find`` but raises EntityNotFoundError when nothing matches."""
        item = None
        if purchasable is not None:
            item = self.find(order, purchasable, filters, actor)
        if item is None:
            raise EntityNotFoundError("Item not found.")
        return item

    def find_or_make(
        self,
        order: Order,
        purchasable: Purchasable,
        quantity: int,
        filters: Mapping[str, object] | None = None,
        actor: str | None = None,
    ) -> tuple[LineItem, bool]:
        """Return ``(item, is_new)`` for the purchasable within *order*.

        A new item is bound to the order and attached to its collection
        but not saved; the caller writes it once its hooks have passed.
        """
        canonical = self._resolver.resolve(purchasable, actor)

        existing = self._item_repo.find_first(
            self.match_criteria(order, canonical, filters)
        )
        if existing is not None:
            order.attach(existing)
            return existing, False

        if not canonical.check_purchasable(actor, quantity):
            raise NotPurchasableError(f"This {canonical.title} cannot be purchased.")

        item_class = self._capabilities.item_class_for(canonical)
        item = canonical.create_line_item(item_class, quantity, filters)
        item.order_id = order.id
        order.attach(item)
        return item, True
