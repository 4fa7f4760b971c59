"""
Cart State

Holds the local view of the shopper's cart and mediates every mutation
through the remote store. The local cart only ever changes to a snapshot
the store has confirmed:

    load()            apply the fetched snapshot wholesale
    add_item()        apply the snapshot returned by the store
    set_quantity()    apply the snapshot returned by the store
    remove_line()     apply the returned snapshot; an absent line is
    remove_product()  treated as already removed and the cart re-fetched
    clear()           set the canonical empty cart once the store confirms

Every remote call takes a dispatch ticket before it is sent. A snapshot is
applied only if no later-dispatched call has been applied already, so a
later load() always wins over an earlier mutation whose answer arrives
late. The store offers no compare-and-swap: concurrent writers from other
clients are last-write-wins. Callers are expected to disable mutation
controls while ``updating`` is true; nothing here queues or blocks.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from ..core.errors import NotFound, StorefrontError, ValidationFailed
from ..core.session import ShopperSession
from ..models import Cart
from .feedback import OperationStatus, StatusTracker
from .store_client import StoreClient

logger = logging.getLogger(__name__)


class CartState:
    """Authoritative local view of the cart, synchronised with the store"""

    def __init__(self, store: StoreClient, session: ShopperSession):
        self.store = store
        self.session = session
        self.cart = Cart.empty()
        self.tracker = StatusTracker()
        self._mutations_in_flight = 0
        self._dispatched = 0
        self._applied = 0

    @property
    def updating(self) -> bool:
        """True while any mutation is waiting on the store"""
        return self._mutations_in_flight > 0

    @property
    def status(self) -> OperationStatus:
        return self.tracker.status

    @property
    def last_error(self) -> Optional[StorefrontError]:
        return self.tracker.last_error

    async def load(self) -> Cart:
        """Fetch the current cart and replace local state with it"""
        self.session.require_identity("view your cart")
        ticket = self._take_ticket()
        with self.tracker.track():
            cart = await self.store.get_cart()
        return self._apply(ticket, cart, "load")

    async def add_item(self, product_id: int, quantity: int = 1) -> Cart:
        """Add a product. Merging into an existing line is the store's job."""
        self.session.require_identity("add items to your cart")
        if quantity < 1:
            raise ValidationFailed("Quantity must be at least 1")

        ticket = self._take_ticket()
        with self.mutation():
            cart = await self.store.add_item(product_id, quantity)
        return self._apply(ticket, cart, f"add product {product_id} x{quantity}")

    async def set_quantity(self, line_id: int, new_quantity: int) -> Cart:
        """Change a line's quantity; use remove_line() to delete it"""
        self.session.require_identity("update your cart")
        if new_quantity < 1:
            raise ValidationFailed("Quantity must be at least 1; remove the item instead")

        ticket = self._take_ticket()
        with self.mutation():
            cart = await self.store.set_quantity(line_id, new_quantity)
        return self._apply(ticket, cart, f"set line {line_id} to {new_quantity}")

    async def remove_line(self, line_id: int) -> Cart:
        """Delete one line. Removing an absent line succeeds."""
        self.session.require_identity("remove items from your cart")
        ticket = self._take_ticket()
        try:
            with self.mutation():
                cart = await self.store.remove_line(line_id)
        except NotFound:
            logger.warning(f"Cart line {line_id} already absent, nothing to remove")
            return await self.load()
        return self._apply(ticket, cart, f"remove line {line_id}")

    async def remove_product(self, product_id: int) -> Cart:
        """Delete the line holding a product. Removing an absent product succeeds."""
        self.session.require_identity("remove items from your cart")
        ticket = self._take_ticket()
        try:
            with self.mutation():
                cart = await self.store.remove_product(product_id)
        except NotFound:
            logger.warning(f"Product {product_id} not in cart, nothing to remove")
            return await self.load()
        return self._apply(ticket, cart, f"remove product {product_id}")

    async def clear(self) -> Cart:
        """Remove every line in one remote operation"""
        self.session.require_identity("clear your cart")
        ticket = self._take_ticket()
        with self.mutation():
            await self.store.clear_cart()
        return self._apply(ticket, Cart.empty(), "clear")

    def reset(self) -> Cart:
        """Drop local state to the empty shape, superseding in-flight answers.

        Used after checkout and sign-out, when the server-side cart is known
        to be gone or no longer ours.
        """
        return self._apply(self._take_ticket(), Cart.empty(), "reset")

    def _take_ticket(self) -> int:
        self._dispatched += 1
        return self._dispatched

    @contextmanager
    def mutation(self) -> Iterator[None]:
        """Mark a store call that changes the cart; ``updating`` is true inside"""
        self._mutations_in_flight += 1
        try:
            with self.tracker.track():
                yield
        finally:
            self._mutations_in_flight -= 1

    def _apply(self, ticket: int, cart: Cart, reason: str) -> Cart:
        if ticket < self._applied:
            logger.warning(
                f"Dropping stale cart snapshot from '{reason}' "
                f"(call #{ticket}, already showing #{self._applied})"
            )
            return self.cart

        self._applied = ticket
        self.cart = cart
        logger.debug(
            f"Cart after {reason}: {len(cart.lines)} lines, "
            f"{cart.item_count} items, total {cart.total}"
        )
        return cart
