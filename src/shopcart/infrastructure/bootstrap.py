"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import os
from pathlib import Path

from shopcart.application.cart import CartContext, ShoppingCart
from shopcart.application.config import CartConfig
from shopcart.application.hooks import HookDispatcher
from shopcart.application.locks import AggregateLocks
from shopcart.domain.model.purchasable import DEFAULT_CAPABILITIES
from shopcart.infrastructure.persistence.json_line_item_repository import (
    JsonLineItemRepository,
)
from shopcart.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from shopcart.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from shopcart.infrastructure.persistence.json_session_store import JsonSessionStore

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DATA_DIR = Path(
    os.environ.get("SHOPCART_DATA_DIR", Path(__file__).resolve().parents[3] / "data")
)

_LOCKS = AggregateLocks()


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(_DATA_DIR / "products.json")


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(_DATA_DIR / "orders.json")


def line_item_repository() -> JsonLineItemRepository:
    return JsonLineItemRepository(_DATA_DIR / "line_items.json")


def session_store(session_id: str) -> JsonSessionStore:
    return JsonSessionStore(_DATA_DIR / "sessions.json", session_id)


def shopping_cart(
    session_id: str,
    actor: str | None = None,
    hooks: HookDispatcher | None = None,
) -> ShoppingCart:
    """Build a cart manager for one request in *session_id*."""
    context = CartContext(
        session=session_store(session_id),
        order_repo=order_repository(),
        item_repo=line_item_repository(),
        catalogue=product_repository(),
        capabilities=DEFAULT_CAPABILITIES,
        hooks=hooks or HookDispatcher(),
        config=CartConfig.from_env(),
        actor=lambda: actor,
        locks=_LOCKS,
    )
    return ShoppingCart(context)
