"""Unit tests for canonical purchasable resolution."""

from shopcart.domain.model.purchasable import Product
from shopcart.domain.model.value_objects import Money
from shopcart.domain.service.purchasable_resolver import PurchasableResolver


def _shirt() -> Product:
    return Product(id="3", name="Shirt", price=Money.of("20.00"))


class TestPurchasableResolver:

    def test_plain_product_unchanged(self):
        product = _shirt()
        assert PurchasableResolver().resolve(product) is product

    def test_product_with_variations_resolves_to_first_purchasable(self):
        product = _shirt()
        small = product.add_variation("Small", Money.of("18.00"))
        product.add_variation("Large", Money.of("22.00"))
        assert PurchasableResolver().resolve(product) is small

    def test_skips_unpurchasable_variations(self):
        product = _shirt()
        small = product.add_variation("Small", Money.of("18.00"))
        small.allow_purchase = False
        large = product.add_variation("Large", Money.of("22.00"))
        assert PurchasableResolver().resolve(product) is large

    def test_no_purchasable_variation_returns_original(self):
        product = _shirt()
        product.add_variation("Small", Money.zero())
        assert PurchasableResolver().resolve(product) is product

    def test_variation_resolves_to_itself(self):
        variation = _shirt().add_variation("Small", Money.of("18.00"))
        assert PurchasableResolver().resolve(variation) is variation
