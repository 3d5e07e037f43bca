"""Domain service: canonical purchasable resolution.

A product that comes in variations must never end up in the cart as
itself.  The resolver swaps it for the first variation that can actually
be bought; anything else passes through unchanged.
"""

from __future__ import annotations

from shopcart.domain.model.purchasable import Purchasable


class PurchasableResolver:

    def resolve(self, purchasable: Purchasable, actor: str | None = None) -> Purchasable:
        variants = purchasable.variants()
        if not variants or purchasable.check_purchasable(actor):
            return purchasable
        for variant in variants:
            if variant.check_purchasable(actor):
                return variant
        return purchasable
