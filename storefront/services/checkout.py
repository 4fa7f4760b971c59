"""Checkout Transition: converts the current cart into an order"""

import logging
from typing import Optional

from ..core.errors import StorefrontError, ValidationFailed
from ..core.session import ShopperSession
from ..models import Order
from .cart import CartState
from .feedback import OperationStatus, StatusTracker
from .store_client import StoreClient

logger = logging.getLogger(__name__)


class CheckoutTransition:
    """
    Places an order from the cart.

    Atomicity belongs to the store: either it creates the order and empties
    the cart, or it changes nothing. The local cart follows suit: reset to
    empty on success, left untouched on failure. The cart reports
    ``updating`` while the order is being placed.
    """

    def __init__(self, store: StoreClient, session: ShopperSession, cart_state: CartState):
        self.store = store
        self.session = session
        self.cart_state = cart_state
        self.tracker = StatusTracker()
        self.last_order: Optional[Order] = None

    @property
    def in_progress(self) -> bool:
        return self.tracker.busy

    @property
    def status(self) -> OperationStatus:
        return self.tracker.status

    async def checkout(self) -> Order:
        """
        Convert the cart into an order.

        Raises:
            AuthRequired: no session; the store is not contacted
            ValidationFailed: the local cart is empty (caller error)
            StorefrontError: the store refused or could not be reached.
                ``retryable`` tells a transient fault from a rejection; a
                rejected checkout should be retried only after re-loading
                the cart, since stock may have moved.
        """
        self.session.require_identity("place an order")
        if self.cart_state.cart.is_empty:
            raise ValidationFailed("Cannot check out an empty cart")

        try:
            with self.tracker.track(), self.cart_state.mutation():
                order = await self.store.create_order_from_cart()
        except StorefrontError as e:
            logger.warning(
                f"Checkout failed ({e.kind.value}, retryable={e.retryable}): {e.message}"
            )
            raise

        self.last_order = order
        self.cart_state.reset()
        logger.info(f"Order {order.id} placed: {order.total_items} items, ${order.total}")
        return order
