"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from pathlib import Path

from shopcart.domain.model.purchasable import Product, ProductVariation
from shopcart.domain.model.value_objects import Money
from shopcart.domain.repository.product_repository import ProductRepository
from shopcart.infrastructure.persistence.json_file import JsonFile


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        return self._load().get(product_id)

    def list_all(self) -> list[Product]:
        return list(self._load().values())

    def save(self, product: Product) -> None:
        products = self._load()
        products[product.id] = product
        self._persist(products)

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Product]:
        products: dict[str, Product] = {}
        for item in self._file.load():
            product = Product(
                id=item["id"],
                name=item["name"],
                price=Money.of(item["price"], item.get("currency", "USD")),
                allow_purchase=item.get("allow_purchase", True),
            )
            product.variations = [
                ProductVariation(
                    id=v["id"],
                    product_id=product.id,
                    product_name=product.name,
                    name=v["name"],
                    price=Money.of(v["price"], item.get("currency", "USD")),
                    allow_purchase=v.get("allow_purchase", True),
                )
                for v in item.get("variations", [])
            ]
            products[product.id] = product
        return products

    def _persist(self, products: dict[str, Product]) -> None:
        self._file.persist(
            [
                {
                    "id": p.id,
                    "name": p.name,
                    "price": str(p.price.amount),
                    "currency": p.price.currency,
                    "allow_purchase": p.allow_purchase,
                    "variations": [
                        {
                            "id": v.id,
                            "name": v.name,
                            "price": str(v.price.amount),
                            "allow_purchase": v.allow_purchase,
                        }
                        for v in p.variations
                    ],
                }
                for p in products.values()
            ]
        )
