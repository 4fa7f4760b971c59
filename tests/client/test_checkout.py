"""Checkout transition and order history."""

import asyncio
from decimal import Decimal

import pytest

from mock_store.database import product_db
from storefront.core.errors import AuthRequired, Conflict, TransientFailure, ValidationFailed
from storefront.core.session import ShopperSession
from storefront.services.cart import CartState
from storefront.services.checkout import CheckoutTransition
from tests.fakes import FakeStoreClient, product, signed_in_session


class TestCheckoutAgainstStore:

    async def test_checkout_produces_order_and_empties_cart(self, shopper):
        await shopper.cart.add_item(1, 2)
        await shopper.cart.add_item(2, 1)

        order = await shopper.checkout.checkout()

        assert order.total == Decimal("25.00")
        assert order.total_items == 3
        assert shopper.cart.cart.is_empty
        assert (await shopper.cart.load()).is_empty

    async def test_order_snapshots_lines(self, shopper):
        await shopper.cart.add_item(1, 2)
        order = await shopper.checkout.checkout()

        line = order.lines[0]
        assert line.product_name == "Blue Mouse"
        assert line.product_category == "Peripherals"
        assert line.unit_price == Decimal("10.00")
        assert line.quantity == 2
        assert line.total_price == Decimal("20.00")

    async def test_stock_conflict_leaves_cart_untouched(self, shopper):
        await shopper.cart.add_item(1, 2)
        await shopper.cart.add_item(2, 1)
        before = shopper.cart.cart

        # Someone else bought the last units in the meantime
        product_db.get_product(2).stock = 0

        with pytest.raises(Conflict) as excinfo:
            await shopper.checkout.checkout()

        assert not excinfo.value.retryable
        assert shopper.cart.cart == before
        server_cart = await shopper.cart.load()
        assert [(line.product_id, line.quantity) for line in server_cart.lines] == [(1, 2), (2, 1)]
        assert product_db.get_product(1).stock == 10
        assert await shopper.orders.list_orders() == []

    async def test_checkout_decrements_stock(self, shopper):
        await shopper.cart.add_item(3, 2)
        await shopper.checkout.checkout()
        assert product_db.get_product(3).stock == 0

    async def test_empty_cart_is_caller_error(self, shopper):
        with pytest.raises(ValidationFailed):
            await shopper.checkout.checkout()

    async def test_requires_session(self, shop):
        with pytest.raises(AuthRequired):
            await shop.checkout.checkout()


class TestCheckoutFailures:

    async def test_transient_failure_is_retryable_and_keeps_cart(self):
        store = FakeStoreClient([product(1, "Blue Mouse", "10.00")])
        session = signed_in_session()
        cart_state = CartState(store, session)
        checkout = CheckoutTransition(store, session, cart_state)
        await cart_state.add_item(1)
        before = cart_state.cart

        store.failures["create_order_from_cart"] = TransientFailure("Network error", None)
        with pytest.raises(TransientFailure) as excinfo:
            await checkout.checkout()

        assert excinfo.value.retryable
        assert cart_state.cart == before
        assert checkout.last_order is None

    async def test_cart_is_updating_while_order_is_placed(self):
        store = FakeStoreClient([product(1, "Blue Mouse", "10.00")])
        session = signed_in_session()
        cart_state = CartState(store, session)
        checkout = CheckoutTransition(store, session, cart_state)
        await cart_state.add_item(1)

        store.gates["create_order_from_cart"] = asyncio.Event()
        task = asyncio.create_task(checkout.checkout())
        await asyncio.sleep(0)

        assert checkout.in_progress
        assert cart_state.updating

        store.gates["create_order_from_cart"].set()
        await task

        assert not cart_state.updating
        assert cart_state.cart.is_empty

    async def test_no_session_never_reaches_store(self):
        store = FakeStoreClient()
        session = ShopperSession()
        checkout = CheckoutTransition(store, session, CartState(store, session))

        with pytest.raises(AuthRequired):
            await checkout.checkout()
        assert store.calls == []


class TestOrderHistory:

    async def test_orders_newest_first(self, shopper):
        await shopper.cart.add_item(1)
        first = await shopper.checkout.checkout()
        await shopper.cart.add_item(2)
        second = await shopper.checkout.checkout()

        orders = await shopper.orders.list_orders()
        assert [o.id for o in orders] == [second.id, first.id]

    async def test_history_not_affected_by_price_changes(self, shopper):
        await shopper.cart.add_item(1, 2)
        placed = await shopper.checkout.checkout()

        product_db.get_product(1).price = Decimal("99.99")

        fetched = await shopper.orders.get_order(placed.id)
        assert fetched.total == Decimal("20.00")
        assert fetched.lines[0].unit_price == Decimal("10.00")

    async def test_other_shoppers_orders_are_hidden(self, shopper, shop):
        await shopper.cart.add_item(1)
        await shopper.checkout.checkout()

        shop.sign_out()
        await shop.register("grace@example.com", "secret2")
        assert await shop.orders.list_orders() == []

    async def test_history_requires_session(self, shop):
        with pytest.raises(AuthRequired):
            await shop.orders.list_orders()
