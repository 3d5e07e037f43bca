"""Application service: the session's shopping cart.

``ShoppingCart`` manipulates the one cart-status order bound to a client
session.  The order is only created (and persisted) on the first add, and
every later operation in the session works on that same order until it is
placed or the cart is cleared.

A ``ShoppingCart`` is built per request from a ``CartContext``; it keeps no
state between requests other than what lives in the session and record
stores.  Every public operation catches domain errors at its boundary and
leaves a message behind instead of raising.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

import structlog

from shopcart.application.config import CartConfig
from shopcart.application.hooks import HookDispatcher, HookPoint
from shopcart.application.locks import AggregateLocks
from shopcart.application.results import OperationResult, Severity
from shopcart.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    HookAbortedError,
    InvalidStateError,
    NoCartFoundError,
    NoOrderError,
)
from shopcart.domain.model.order import LineItem, Order, OrderStatus
from shopcart.domain.model.purchasable import (
    DEFAULT_CAPABILITIES,
    CapabilityTable,
    Purchasable,
)
from shopcart.domain.model.value_objects import Quantity
from shopcart.domain.repository.line_item_repository import LineItemRepository
from shopcart.domain.repository.order_repository import OrderRepository
from shopcart.domain.repository.product_repository import ProductRepository
from shopcart.domain.repository.session_store import SessionStore
from shopcart.domain.service.archival_coordinator import ArchivalCoordinator
from shopcart.domain.service.line_item_reconciler import LineItemReconciler
from shopcart.domain.service.purchasable_resolver import PurchasableResolver

logger = structlog.get_logger(__name__)

Filters = Mapping[str, object]


def _anonymous() -> str | None:
    return None


@dataclass
class CartContext:
    """Everything a cart manager needs for one request."""

    session: SessionStore
    order_repo: OrderRepository
    item_repo: LineItemRepository
    catalogue: ProductRepository
    capabilities: CapabilityTable = DEFAULT_CAPABILITIES
    hooks: HookDispatcher = field(default_factory=HookDispatcher)
    config: CartConfig = field(default_factory=CartConfig)
    actor: Callable[[], str | None] = _anonymous
    locks: AggregateLocks = field(default_factory=AggregateLocks)


class ShoppingCart:

    def __init__(self, context: CartContext) -> None:
        self._ctx = context
        self._resolver = PurchasableResolver()
        self._reconciler = LineItemReconciler(
            context.item_repo, context.capabilities, self._resolver
        )
        self._archivist = ArchivalCoordinator(context.session, context.config.history_key)
        self._order: Order | None = None
        self._calculated = False
        self._result: OperationResult | None = None

    # --- Current order --------------------------------------------------------

    def current(self) -> Order | None:
        """Return the session's cart-status order, or None.

        The first successful lookup recalculates the order's totals; later
        calls on the same manager reuse the result.
        """
        if self._order is None:
            order_id = self._ctx.session.get(self._ctx.config.session_key)
            if order_id is not None:
                order = self._ctx.order_repo.find_first(
                    {"id": order_id, "status": OrderStatus.CART}
                )
                if order is not None:
                    order.items = self._ctx.item_repo.list_for_order(order.id)
                    self._order = order

        if self._order is not None and not self._calculated:
            self._order.calculate()
            self._calculated = True

        return self._order

    def set_current(self, order: Order) -> ShoppingCart:
        """Bind *order* as the session's cart.

        Binding an order that is not in cart status is a programming error
        and raises InvalidStateError.
        """
        if not order.is_cart:
            raise InvalidStateError(
                f"Order #{order.id} is {order.status.value}, not a cart"
            )
        self._order = order
        self._ctx.session.set(self._ctx.config.session_key, order.id)
        return self

    def _find_or_make(self) -> Order:
        """Return the current cart, starting one if the session has none.

        This is the only place a cart-status order is ever created.
        """
        order = self.current()
        if order is not None:
            return order

        with self._ctx.locks.hold(("session", self._ctx.session.session_id)):
            order = self.current()
            if order is not None:
                return order

            member_id = None
            if self._ctx.config.attach_actor_on_start:
                member_id = self._ctx.actor()

            order = Order.start(member_id=member_id)
            self._ctx.order_repo.save(order)
            self._ctx.hooks.dispatch(HookPoint.ON_START_ORDER, order)
            self._ctx.session.set(self._ctx.config.session_key, order.id)
            self._order = order

        logger.info("Cart started", order_id=order.id, member_id=member_id)
        return order

    # --- Add ------------------------------------------------------------------

    def add(
        self,
        purchasable: Purchasable | None,
        quantity: int = 1,
        filters: Filters | None = None,
    ) -> LineItem | None:
        """Add *quantity* of a purchasable, merging into a matching item.

        Returns the new or updated line item, or None on failure.
        """
        filters = dict(filters or {})
        try:
            order = self._find_or_make()
            self._fire(HookPoint.BEFORE_ADD, purchasable, quantity, filters)
            if purchasable is None:
                raise EntityNotFoundError("Product not found.")
            amount = Quantity(quantity).value

            with self._ctx.locks.hold(order.id):
                item, is_new = self._reconciler.find_or_make(
                    order, purchasable, amount, filters, self._ctx.actor()
                )
                previous = item.quantity
                item.quantity = amount if is_new else previous + amount
                try:
                    self._fire(HookPoint.AFTER_ADD, item, purchasable, quantity, filters)
                except HookAbortedError:
                    if is_new:
                        order.detach(item)
                    else:
                        item.quantity = previous
                    raise
                self._ctx.item_repo.save(item)
        except DomainException as exc:
            return self._error(exc)

        logger.info(
            "Item added to cart",
            order_id=order.id,
            item_id=item.id,
            purchasable=f"{item.purchasable_kind}:{item.purchasable_id}",
            quantity=item.quantity,
        )
        self._message("Item has been added successfully.")
        return item

    # --- Remove ---------------------------------------------------------------

    def remove(
        self,
        purchasable: Purchasable | None,
        quantity: int | None = None,
        filters: Filters | None = None,
    ) -> bool:
        """Remove *quantity* of a purchasable, or all of it when unset.

        An ``after_remove`` veto is reported but does not undo the removal.
        """
        filters = dict(filters or {})
        try:
            order = self._require_order()
            self._fire(HookPoint.BEFORE_REMOVE, purchasable, quantity, filters)
            with self._ctx.locks.hold(order.id):
                item = self._reconciler.get(order, purchasable, filters, self._ctx.actor())
                self._remove_item(order, item, quantity)
            self._fire(HookPoint.AFTER_REMOVE, item, purchasable, quantity, filters)
        except DomainException as exc:
            self._error(exc)
            return False

        self._message("Item has been successfully removed.")
        return True

    def remove_order_item(self, item: LineItem | None, quantity: int | None = None) -> bool:
        """Remove *quantity* units of a specific line item, or all when unset."""
        try:
            order = self._require_order()
            if item is None or item.order_id != order.id:
                raise EntityNotFoundError("Item not found.")
            with self._ctx.locks.hold(order.id):
                stored = self._ctx.item_repo.find_first({"id": item.id, "order_id": order.id})
                if stored is None:
                    raise EntityNotFoundError("Item not found.")
                self._remove_item(order, stored, quantity)
                item.quantity = stored.quantity
        except DomainException as exc:
            self._error(exc)
            return False

        self._message("Item has been successfully removed.")
        return True

    def _remove_item(self, order: Order, item: LineItem, quantity: int | None) -> None:
        # Caller holds the order's lock and passes the row as currently stored.
        if quantity is None or quantity <= 0 or item.quantity - quantity <= 0:
            self._ctx.item_repo.delete(item)
            order.detach(item)
            logger.info("Item removed from cart", order_id=order.id, item_id=item.id)
        else:
            item.quantity -= quantity
            self._ctx.item_repo.save(item)
            order.attach(item)
            logger.info(
                "Item quantity reduced",
                order_id=order.id,
                item_id=item.id,
                quantity=item.quantity,
            )

    # --- Set quantity ---------------------------------------------------------

    def set_quantity(
        self,
        purchasable: Purchasable | None,
        quantity: int = 1,
        filters: Filters | None = None,
    ) -> LineItem | bool | None:
        """Overwrite the quantity of a purchasable, adding it if needed.

        A quantity of zero or less removes the item instead and returns the
        outcome of ``remove``.
        """
        if quantity <= 0:
            return self.remove(purchasable, quantity, filters)

        filters = dict(filters or {})
        try:
            order = self._find_or_make()
            if purchasable is None:
                raise EntityNotFoundError("Product not found.")
            with self._ctx.locks.hold(order.id):
                item, is_new = self._reconciler.find_or_make(
                    order, purchasable, quantity, filters, self._ctx.actor()
                )
                try:
                    self._update_quantity(order, item, quantity, filters)
                except DomainException:
                    if is_new:
                        order.detach(item)
                    raise
        except DomainException as exc:
            return self._error(exc)

        return item

    def update_order_item_quantity(
        self,
        item: LineItem | None,
        quantity: int = 1,
        filters: Filters | None = None,
    ) -> bool:
        """Overwrite the quantity of a specific line item."""
        try:
            order = self._require_order()
            with self._ctx.locks.hold(order.id):
                self._update_quantity(order, item, quantity, dict(filters or {}))
        except DomainException as exc:
            self._error(exc)
            return False
        return True

    def _update_quantity(
        self,
        order: Order,
        item: LineItem | None,
        quantity: int,
        filters: Filters,
    ) -> None:
        if item is None or item.order_id != order.id:
            raise EntityNotFoundError("Item not found.")
        amount = Quantity(quantity).value

        purchasable = self._ctx.catalogue.get_purchasable(
            item.purchasable_kind, item.purchasable_id
        )
        self._fire(HookPoint.BEFORE_SET_QUANTITY, purchasable, amount, filters)
        previous = item.quantity
        item.quantity = amount
        try:
            self._fire(HookPoint.AFTER_SET_QUANTITY, item, purchasable, amount, filters)
        except HookAbortedError:
            item.quantity = previous
            raise
        self._ctx.item_repo.save(item)

        logger.info("Item quantity set", order_id=order.id, item_id=item.id, quantity=amount)
        self._message("Quantity has been set.")

    # --- Lookup ---------------------------------------------------------------

    def get(self, purchasable: Purchasable | None, filters: Filters | None = None) -> LineItem | None:
        """Return the line item for a purchasable and options, or None."""
        try:
            order = self.current()
            if order is None:
                raise EntityNotFoundError("Item not found.")
            return self._reconciler.get(order, purchasable, filters, self._ctx.actor())
        except DomainException as exc:
            return self._error(exc)

    def resolve(self, purchasable: Purchasable) -> Purchasable:
        """The purchasable that is actually transacted for *purchasable*."""
        return self._resolver.resolve(purchasable, self._ctx.actor())

    # --- Clear and archive ----------------------------------------------------

    def clear(self, persist: bool = True) -> bool:
        """Abandon the cart: unbind it from the session.

        The binding is always cleared, even when no cart is found.
        """
        order = self.current()
        self._ctx.session.clear(self._ctx.config.session_key)
        self._order = None
        self._calculated = False

        if order is None:
            self._error(NoCartFoundError("No cart found."))
            return False
        if persist:
            self._ctx.order_repo.save(order)

        logger.info("Cart cleared", order_id=order.id, status=order.status.value)
        self._message("Cart was successfully cleared.")
        return True

    def archive_current_session(self, requested_order_id: int | None = None) -> None:
        """Hand a placed order over to the session history.

        The cart is only cleared when no particular order was requested, or
        the requested order is the one bound to the session; viewing an old
        order must not wipe the current cart.
        """
        session_order_id = self._ctx.session.get(self._ctx.config.session_key)
        order = None
        if session_order_id is not None:
            order = self._ctx.order_repo.get_by_id(session_order_id)

        if order is not None and not order.is_cart:
            if self._archivist.record(order):
                logger.info("Order archived to session history", order_id=order.id)

        if requested_order_id is None or requested_order_id == session_order_id:
            self.clear()

    def order_history(self) -> list[int]:
        return self._archivist.order_ids()

    # --- Result channel -------------------------------------------------------

    @property
    def last_result(self) -> OperationResult | None:
        return self._result

    @property
    def message(self) -> str | None:
        return self._result.message if self._result else None

    @property
    def message_type(self) -> Severity | None:
        return self._result.severity if self._result else None

    def clear_message(self) -> None:
        self._result = None

    # --- Internal helpers -----------------------------------------------------

    def _require_order(self) -> Order:
        order = self.current()
        if order is None:
            raise NoOrderError("No current order.")
        return order

    def _fire(self, hook: HookPoint, *args: object) -> None:
        veto = self._ctx.hooks.dispatch(hook, *args)
        if veto is not None:
            raise HookAbortedError(veto.message)

    def _message(self, message: str, severity: Severity = Severity.GOOD) -> None:
        self._result = OperationResult(message, severity)

    def _error(self, exc: DomainException) -> None:
        logger.warning(
            "Cart operation failed",
            error=type(exc).__name__,
            reason=str(exc),
        )
        self._message(str(exc), Severity.BAD)
        return None
