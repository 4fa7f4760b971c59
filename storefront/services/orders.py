"""Order History View (read-only)"""

import logging

from ..core.session import ShopperSession
from ..models import Order
from .feedback import OperationStatus, StatusTracker
from .store_client import StoreClient

logger = logging.getLogger(__name__)


class OrderHistory:
    """Previously placed orders, in the order the store returns them (newest first)"""

    def __init__(self, store: StoreClient, session: ShopperSession):
        self.store = store
        self.session = session
        self.orders: list[Order] = []
        self.tracker = StatusTracker()

    @property
    def status(self) -> OperationStatus:
        return self.tracker.status

    async def list_orders(self) -> list[Order]:
        self.session.require_identity("view your orders")
        with self.tracker.track():
            self.orders = await self.store.list_orders()
        logger.debug(f"Fetched {len(self.orders)} orders")
        return self.orders

    async def get_order(self, order_id: int) -> Order:
        self.session.require_identity("view your orders")
        with self.tracker.track():
            return await self.store.get_order(order_id)
