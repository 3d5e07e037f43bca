"""Application service: Add Product use case."""

from __future__ import annotations

from shopcart.domain.exceptions import ValidationError
from shopcart.domain.model.purchasable import Product
from shopcart.domain.model.value_objects import Money
from shopcart.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        name: str,
        price: str,
        variations: list[tuple[str, str]] | None = None,
    ) -> Product:
        """Add a new product, optionally with (name, price) variations."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        all_products = self._product_repo.list_all()
        if any(p.name.lower() == name.strip().lower() for p in all_products):
            raise ValidationError(f"Product '{name}' already exists")

        # Auto-assign ID based on existing products
        if all_products:
            next_id = str(max(int(p.id) for p in all_products) + 1)
        else:
            next_id = "1"

        product = Product(id=next_id, name=name.strip(), price=Money.of(price))
        for variation_name, variation_price in variations or []:
            product.add_variation(variation_name.strip(), Money.of(variation_price))

        self._product_repo.save(product)
        return product
