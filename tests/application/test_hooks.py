"""Tests for hook points around cart mutations."""

from shopcart.application.hooks import HookDispatcher, HookPoint, Veto
from shopcart.application.results import Severity
from tests.fakes import CartWorld, RecordingObserver


def _setup(veto: dict[HookPoint, str] | None = None) -> tuple[CartWorld, RecordingObserver]:
    world = CartWorld()
    observer = RecordingObserver(veto)
    world.hooks.register_extension(observer)
    return world, observer


class TestHookDispatcher:

    def test_observers_run_in_order_until_veto(self):
        dispatcher = HookDispatcher()
        seen = []
        dispatcher.register(HookPoint.BEFORE_ADD, lambda *a: seen.append("first"))
        dispatcher.register(HookPoint.BEFORE_ADD, lambda *a: Veto("stop"))
        dispatcher.register(HookPoint.BEFORE_ADD, lambda *a: seen.append("third"))

        veto = dispatcher.dispatch(HookPoint.BEFORE_ADD, "x")
        assert veto == Veto("stop")
        assert seen == ["first"]

    def test_no_observers(self):
        assert HookDispatcher().dispatch(HookPoint.AFTER_ADD) is None

    def test_register_extension_only_subscribes_defined_methods(self):
        class OnlyBeforeAdd:
            def before_add(self, *args):
                return Veto("nope")

        dispatcher = HookDispatcher()
        dispatcher.register_extension(OnlyBeforeAdd())
        assert dispatcher.dispatch(HookPoint.BEFORE_ADD) == Veto("nope")
        assert dispatcher.dispatch(HookPoint.AFTER_ADD) is None


class TestAddHooks:

    def test_hook_order_for_first_add(self):
        world, observer = _setup()
        world.cart().add(world.product("1"), 2, {"opt": "A"})
        assert observer.hooks_called() == [
            HookPoint.ON_START_ORDER,
            HookPoint.BEFORE_ADD,
            HookPoint.AFTER_ADD,
        ]
        _, before_args = observer.calls[1]
        assert before_args == (world.product("1"), 2, {"opt": "A"})

    def test_before_add_veto_creates_nothing(self):
        world, observer = _setup({HookPoint.BEFORE_ADD: "Cart is locked"})
        cart = world.cart()
        assert cart.add(world.product("1")) is None
        assert cart.message == "Cart is locked"
        assert cart.message_type == Severity.BAD
        assert world.items.all() == []
        assert world.items.save_count == 0
        assert HookPoint.AFTER_ADD not in observer.hooks_called()

    def test_after_add_veto_skips_persistence(self):
        world, _ = _setup({HookPoint.AFTER_ADD: "Limit reached"})
        cart = world.cart()
        assert cart.add(world.product("1")) is None
        assert cart.message == "Limit reached"
        assert world.items.save_count == 0

    def test_after_add_veto_on_existing_item_keeps_stored_row(self):
        world = CartWorld()
        world.cart().add(world.product("1"), 2)
        saves = world.items.save_count

        world.hooks.register(HookPoint.AFTER_ADD, lambda *a: Veto("Limit reached"))
        assert world.cart().add(world.product("1"), 1) is None
        assert world.items.save_count == saves
        assert world.items.all()[0].quantity == 2

    def test_start_hook_fires_once(self):
        world, observer = _setup()
        world.cart().add(world.product("1"))
        world.cart().add(world.product("2"))
        assert observer.hooks_called().count(HookPoint.ON_START_ORDER) == 1


class TestRemoveHooks:

    def test_before_remove_veto_keeps_item(self):
        world, _ = _setup({HookPoint.BEFORE_REMOVE: "Not allowed"})
        world.cart().add(world.product("1"), 2)

        cart = world.cart()
        assert not cart.remove(world.product("1"))
        assert cart.message == "Not allowed"
        assert world.items.all()[0].quantity == 2

    def test_after_remove_veto_does_not_roll_back(self):
        world, _ = _setup({HookPoint.AFTER_REMOVE: "Too late"})
        world.cart().add(world.product("1"), 2)

        cart = world.cart()
        assert not cart.remove(world.product("1"))
        assert cart.message == "Too late"
        assert world.items.all() == []

    def test_after_remove_receives_item(self):
        world, observer = _setup()
        item = world.cart().add(world.product("1"), 2)
        world.cart().remove(world.product("1"), 1)
        hook, args = observer.calls[-1]
        assert hook == HookPoint.AFTER_REMOVE
        assert args[0] is item
        assert args[2] == 1


class TestSetQuantityHooks:

    def test_hooks_receive_purchasable_from_catalogue(self):
        world, observer = _setup()
        world.cart().set_quantity(world.product("2"), 3)
        calls = [(hook, args) for hook, args in observer.calls if hook == HookPoint.BEFORE_SET_QUANTITY]
        assert calls == [(HookPoint.BEFORE_SET_QUANTITY, (world.product("2"), 3, {}))]

    def test_before_set_quantity_veto(self):
        world = CartWorld()
        world.cart().add(world.product("1"), 2)
        world.hooks.register(HookPoint.BEFORE_SET_QUANTITY, lambda *a: Veto("Frozen"))

        cart = world.cart()
        assert cart.set_quantity(world.product("1"), 9) is None
        assert cart.message == "Frozen"
        assert world.items.all()[0].quantity == 2

    def test_before_set_quantity_veto_on_new_item_leaves_cart_unchanged(self):
        world = CartWorld()
        world.cart().add(world.product("1"), 1)
        world.hooks.register(HookPoint.BEFORE_SET_QUANTITY, lambda *a: Veto("Frozen"))

        cart = world.cart()
        assert cart.set_quantity(world.product("2"), 4) is None
        assert [(i.title, i.quantity) for i in cart.current().items] == [("Widget", 1)]
        assert [i.title for i in world.items.all()] == ["Widget"]

    def test_after_set_quantity_veto_on_new_item_leaves_cart_unchanged(self):
        world = CartWorld()
        world.cart().add(world.product("1"), 1)
        saves = world.items.save_count
        world.hooks.register(HookPoint.AFTER_SET_QUANTITY, lambda *a: Veto("Too many"))

        cart = world.cart()
        assert cart.set_quantity(world.product("2"), 4) is None
        assert cart.message == "Too many"
        assert cart.message_type == Severity.BAD
        assert len(cart.current().items) == 1
        assert world.items.save_count == saves

    def test_after_set_quantity_veto_restores_existing_quantity(self):
        world = CartWorld()
        world.cart().add(world.product("1"), 2)
        saves = world.items.save_count
        world.hooks.register(HookPoint.AFTER_SET_QUANTITY, lambda *a: Veto("Too many"))

        cart = world.cart()
        assert cart.set_quantity(world.product("1"), 9) is None
        assert world.items.all()[0].quantity == 2
        assert world.items.save_count == saves

    def test_after_set_quantity_veto_on_order_item(self):
        world = CartWorld()
        item = world.cart().add(world.product("1"), 2)
        world.hooks.register(HookPoint.AFTER_SET_QUANTITY, lambda *a: Veto("Too many"))

        cart = world.cart()
        assert not cart.update_order_item_quantity(item, 5)
        assert item.quantity == 2
