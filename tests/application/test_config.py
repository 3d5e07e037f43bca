"""Tests for cart configuration."""

from shopcart.application.config import CartConfig


class TestCartConfig:

    def test_defaults(self):
        config = CartConfig.from_env({})
        assert config == CartConfig()
        assert config.session_key == "shoppingcartid"
        assert config.history_key == "shoppingcart.orders"
        assert config.attach_actor_on_start

    def test_overrides(self):
        config = CartConfig.from_env({
            "SHOPCART_SESSION_KEY": "cart",
            "SHOPCART_HISTORY_KEY": "orders",
            "SHOPCART_ATTACH_ACTOR": "no",
        })
        assert config.session_key == "cart"
        assert config.history_key == "orders"
        assert not config.attach_actor_on_start

    def test_truthy_attach_values(self):
        assert CartConfig.from_env({"SHOPCART_ATTACH_ACTOR": "Yes"}).attach_actor_on_start
