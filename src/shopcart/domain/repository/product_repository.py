"""Abstract repository for the product catalogue.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory) live in the
infrastructure layer and the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopcart.domain.model.purchasable import Product, ProductVariation, Purchasable


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalogue."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product (with its variations)."""

    def get_variation(self, variation_id: str) -> ProductVariation | None:
        for product in self.list_all():
            for variation in product.variations:
                if variation.id == variation_id:
                    return variation
        return None

    def get_purchasable(self, kind: str, purchasable_id: str) -> Purchasable | None:
        """Look a purchasable up by its kind tag and ID."""
        if kind == Product.kind:
            return self.get_by_id(purchasable_id)
        if kind == ProductVariation.kind:
            return self.get_variation(purchasable_id)
        return None
