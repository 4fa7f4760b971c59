"""Unit tests for CartState against the in-memory fake store."""

import asyncio
from decimal import Decimal

import pytest

from storefront.core.errors import AuthRequired, Conflict, NotFound, ValidationFailed
from storefront.core.session import ShopperSession
from storefront.services.cart import CartState
from storefront.services.feedback import OperationStatus
from tests.fakes import FakeStoreClient, product, signed_in_session


def _setup(session: ShopperSession | None = None) -> tuple[CartState, FakeStoreClient]:
    store = FakeStoreClient([
        product(1, "Blue Mouse", "10.00"),
        product(2, "Red Mouse", "5.00"),
        product(3, "Webcam", "49.99", category="Video"),
    ])
    state = CartState(store, session or signed_in_session())
    return state, store


class TestTotals:

    async def test_totals_follow_every_mutation(self):
        state, _ = _setup()

        cart = await state.add_item(1, 2)
        assert cart.total == Decimal("20.00")
        assert cart.item_count == 2

        cart = await state.add_item(2)
        assert cart.total == Decimal("25.00")
        assert cart.item_count == 3

        line = cart.line_for_product(1)
        cart = await state.set_quantity(line.id, 5)
        assert cart.line(line.id).subtotal == Decimal("50.00")
        assert cart.total == Decimal("55.00")
        assert cart.item_count == 6

        cart = await state.remove_product(2)
        assert cart.total == Decimal("50.00")
        assert cart.item_count == 5

    async def test_total_is_sum_of_line_subtotals(self):
        state, _ = _setup()
        await state.add_item(1, 3)
        await state.add_item(3, 2)

        cart = state.cart
        assert cart.total == sum(line.quantity * line.unit_price for line in cart.lines)
        assert cart.item_count == sum(line.quantity for line in cart.lines)


class TestAuthentication:

    @pytest.mark.parametrize("call", [
        lambda s: s.load(),
        lambda s: s.add_item(1),
        lambda s: s.set_quantity(1, 2),
        lambda s: s.remove_line(1),
        lambda s: s.remove_product(1),
        lambda s: s.clear(),
    ])
    async def test_no_session_never_reaches_store(self, call):
        state, store = _setup(ShopperSession())
        with pytest.raises(AuthRequired):
            await call(state)
        assert store.calls == []


class TestAddItem:

    async def test_adding_same_product_twice_gives_one_line(self):
        state, _ = _setup()
        await state.add_item(1)
        cart = await state.add_item(1)

        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 2

    async def test_non_positive_quantity_rejected_locally(self):
        state, store = _setup()
        with pytest.raises(ValidationFailed):
            await state.add_item(1, 0)
        assert store.calls == []

    async def test_failed_add_keeps_last_confirmed_cart(self):
        state, store = _setup()
        await state.add_item(1)
        before = state.cart

        store.failures["add_item"] = Conflict("Insufficient stock. Available: 0", 409)
        with pytest.raises(Conflict):
            await state.add_item(3)

        assert state.cart == before
        assert state.status == OperationStatus.ERROR
        assert isinstance(state.last_error, Conflict)


class TestSetQuantity:

    @pytest.mark.parametrize("quantity", [0, -1])
    async def test_non_positive_quantity_rejected_and_preserved(self, quantity):
        state, store = _setup()
        cart = await state.add_item(1, 3)
        line_id = cart.lines[0].id
        store.calls.clear()

        with pytest.raises(ValidationFailed):
            await state.set_quantity(line_id, quantity)

        assert store.calls == []
        assert state.cart.line(line_id).quantity == 3

    async def test_missing_line_is_a_real_failure(self):
        state, _ = _setup()
        with pytest.raises(NotFound):
            await state.set_quantity(99, 2)


class TestRemove:

    async def test_remove_absent_line_succeeds_without_change(self):
        state, _ = _setup()
        await state.add_item(1)
        before = state.cart

        cart = await state.remove_line(99)

        assert cart == before
        assert state.status == OperationStatus.IDLE
        assert state.last_error is None

    async def test_remove_absent_product_succeeds(self):
        state, _ = _setup()
        await state.add_item(1)
        cart = await state.remove_product(2)
        assert [line.product_id for line in cart.lines] == [1]

    async def test_remove_twice_is_idempotent(self):
        state, _ = _setup()
        cart = await state.add_item(1)
        line_id = cart.lines[0].id

        await state.remove_line(line_id)
        cart = await state.remove_line(line_id)
        assert cart.is_empty


class TestClear:

    async def test_clear_sets_empty_shape_without_reloading(self):
        state, store = _setup()
        await state.add_item(1)
        await state.add_item(2)
        store.calls.clear()

        cart = await state.clear()

        assert store.calls == ["clear_cart"]
        assert cart.is_empty
        assert cart.total == Decimal("0.00")
        assert cart.id is None

    async def test_clear_then_load_is_empty(self):
        state, _ = _setup()
        await state.add_item(1)
        await state.clear()
        cart = await state.load()
        assert cart.lines == []
        assert cart.total == 0


class TestInFlight:

    async def test_updating_only_while_mutation_pending(self):
        state, store = _setup()
        store.gates["add_item"] = asyncio.Event()

        task = asyncio.create_task(state.add_item(1))
        await asyncio.sleep(0)
        assert state.updating
        assert state.status == OperationStatus.LOADING

        store.gates["add_item"].set()
        await task
        assert not state.updating
        assert state.status == OperationStatus.IDLE

    async def test_later_load_wins_over_late_mutation_answer(self):
        state, store = _setup()
        store.gates["add_item"] = asyncio.Event()

        task = asyncio.create_task(state.add_item(1))
        await asyncio.sleep(0)
        await state.load()

        store.gates["add_item"].set()
        result = await task

        assert state.cart.is_empty
        assert result is state.cart

    async def test_late_load_answer_does_not_undo_later_mutation(self):
        state, store = _setup()
        store.gates["get_cart"] = asyncio.Event()

        task = asyncio.create_task(state.load())
        await asyncio.sleep(0)
        await state.add_item(2)

        store.gates["get_cart"].set()
        await task

        assert [line.product_id for line in state.cart.lines] == [2]

    async def test_reset_supersedes_in_flight_answers(self):
        state, store = _setup()
        store.gates["add_item"] = asyncio.Event()

        task = asyncio.create_task(state.add_item(1))
        await asyncio.sleep(0)
        state.reset()
        store.gates["add_item"].set()
        await task

        assert state.cart.is_empty
