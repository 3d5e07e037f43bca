"""Unit tests for line item find-or-make."""

import pytest

from shopcart.domain.exceptions import EntityNotFoundError, NotPurchasableError
from shopcart.domain.model.order import Order
from shopcart.domain.service.line_item_reconciler import LineItemReconciler
from tests.fakes import TEST_CAPABILITIES, FakeLineItemRepository, sample_products


def _setup() -> tuple[LineItemReconciler, FakeLineItemRepository, Order, dict]:
    item_repo = FakeLineItemRepository()
    reconciler = LineItemReconciler(item_repo, TEST_CAPABILITIES)
    order = Order(id=1)
    products = {p.id: p for p in sample_products()}
    return reconciler, item_repo, order, products


class TestFindOrMake:

    def test_new_item_is_bound_but_not_saved(self):
        reconciler, item_repo, order, products = _setup()
        item, is_new = reconciler.find_or_make(order, products["1"], 2)
        assert is_new
        assert item.order_id == 1
        assert item.quantity == 2
        assert order.items == [item]
        assert item_repo.save_count == 0

    def test_existing_item_is_found(self):
        reconciler, item_repo, order, products = _setup()
        item, _ = reconciler.find_or_make(order, products["1"], 1)
        item_repo.save(item)

        again, is_new = reconciler.find_or_make(order, products["1"], 5)
        assert not is_new
        assert again is item
        assert again.quantity == 1  # quantity arithmetic belongs to the caller

    def test_filters_discriminate(self):
        reconciler, item_repo, order, products = _setup()
        a, _ = reconciler.find_or_make(order, products["1"], 1, {"opt": "A"})
        item_repo.save(a)
        b, is_new = reconciler.find_or_make(order, products["1"], 1, {"opt": "B"})
        assert is_new
        assert b is not a

    def test_items_of_other_orders_are_ignored(self):
        reconciler, item_repo, order, products = _setup()
        item, _ = reconciler.find_or_make(order, products["1"], 1)
        item_repo.save(item)
        _, is_new = reconciler.find_or_make(Order(id=2), products["1"], 1)
        assert is_new

    def test_not_purchasable(self):
        reconciler, _, order, products = _setup()
        with pytest.raises(NotPurchasableError, match="Retired cannot be purchased"):
            reconciler.find_or_make(order, products["4"], 1)
        assert order.items == []

    def test_parent_product_becomes_variation(self):
        reconciler, _, order, products = _setup()
        item, _ = reconciler.find_or_make(order, products["3"], 1)
        assert item.purchasable_kind == "variation"
        assert item.purchasable_id == "3-1"
        assert item.item_type == "variation_item"


class TestMatchCriteria:

    def test_includes_order_relationship_and_required_fields(self):
        reconciler, _, order, products = _setup()
        criteria = reconciler.match_criteria(order, products["1"], {"opt": "A", "other": "x"})
        assert criteria == {
            "order_id": 1,
            "item_type": "product_item",
            "product_id": "1",
            "opt": "A",
            "color": None,
        }


class TestGet:

    def test_missing_item_raises(self):
        reconciler, _, order, products = _setup()
        with pytest.raises(EntityNotFoundError, match="Item not found"):
            reconciler.get(order, products["1"])

    def test_missing_purchasable_raises(self):
        reconciler, _, order, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Item not found"):
            reconciler.get(order, None)

    def test_plain_lookup_does_not_match_optioned_item(self):
        reconciler, item_repo, order, products = _setup()
        item, _ = reconciler.find_or_make(order, products["1"], 1, {"color": "red"})
        item_repo.save(item)
        with pytest.raises(EntityNotFoundError):
            reconciler.get(order, products["1"])
        assert reconciler.get(order, products["1"], {"color": "red"}) is item
