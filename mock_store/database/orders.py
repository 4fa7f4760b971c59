"""Order storage for the reference store"""

import itertools
from datetime import datetime, timezone
from typing import Optional

from ..models.cart import Cart
from ..models.order import Order, OrderItem
from ..models.product import Product


class OrderDatabase:
    """In-memory order storage"""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.orders: dict[int, Order] = {}
        self._order_ids = itertools.count(1)

    def create_order(self, cart: Cart, products: dict[int, Product]) -> Order:
        """
        Create an order from a cart.

        Each line snapshots the product's name, category and the cart's unit
        price, so later catalog edits never change placed orders.
        """
        order_items = [
            OrderItem(
                product_id=item.product_id,
                product_name=item.product_name,
                product_category=products[item.product_id].category,
                product_price=item.product_price,
                quantity=item.quantity,
                total_price=item.subtotal,
            )
            for item in cart.items
        ]

        order = Order(
            id=next(self._order_ids),
            user_id=cart.user_id,
            created_at=datetime.now(timezone.utc),
            items=order_items,
            total_amount=cart.total,
            total_items=cart.total_items,
        )

        self.orders[order.id] = order
        return order

    def get_order(self, order_id: int) -> Optional[Order]:
        """Get an order by ID"""
        return self.orders.get(order_id)

    def list_orders(self, user_id: int, limit: int = 50) -> list[Order]:
        """List a user's orders, newest first"""
        orders = [o for o in self.orders.values() if o.user_id == user_id]
        orders.sort(key=lambda o: (o.created_at, o.id), reverse=True)
        return orders[:limit]

    def references_product(self, product_id: int) -> bool:
        return any(
            item.product_id == product_id
            for order in self.orders.values()
            for item in order.items
        )


# Singleton instance
order_db = OrderDatabase()
