"""Cart storage for the reference store"""

import itertools
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from ..models.cart import Cart, CartItem
from ..models.product import Product


class CartDatabase:
    """In-memory cart storage, one cart per user"""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.carts: dict[int, Cart] = {}
        self._cart_ids = itertools.count(1)
        self._line_ids = itertools.count(1)

    def get_or_create_cart(self, user_id: int) -> Cart:
        """Get the user's cart, creating an empty one on first access"""
        cart = self.carts.get(user_id)
        if cart is None:
            cart = Cart(
                id=next(self._cart_ids),
                user_id=user_id,
                items=[],
                updated_at=datetime.now(timezone.utc),
            )
            self.carts[user_id] = cart
        return cart

    def find_item(self, user_id: int, item_id: int) -> Optional[CartItem]:
        cart = self.get_or_create_cart(user_id)
        return next((item for item in cart.items if item.id == item_id), None)

    def find_product_item(self, user_id: int, product_id: int) -> Optional[CartItem]:
        cart = self.get_or_create_cart(user_id)
        return next((item for item in cart.items if item.product_id == product_id), None)

    def add_item(self, user_id: int, product: Product, quantity: int = 1) -> Cart:
        """Add a product, merging with its existing line"""
        cart = self.get_or_create_cart(user_id)

        existing_item = self.find_product_item(user_id, product.id)
        if existing_item:
            existing_item.quantity += quantity
            existing_item.subtotal = existing_item.product_price * existing_item.quantity
        else:
            cart.items.append(
                CartItem(
                    id=next(self._line_ids),
                    product_id=product.id,
                    product_name=product.name,
                    product_price=product.price,
                    quantity=quantity,
                    subtotal=product.price * quantity,
                )
            )

        self._recalculate_totals(cart)
        return cart

    def update_item_quantity(self, user_id: int, item_id: int, quantity: int) -> Optional[Cart]:
        """Set a line's quantity. Returns None when the line is absent."""
        cart = self.get_or_create_cart(user_id)
        item = self.find_item(user_id, item_id)
        if not item:
            return None

        item.quantity = quantity
        item.subtotal = item.product_price * quantity

        self._recalculate_totals(cart)
        return cart

    def remove_item(self, user_id: int, item_id: int) -> Optional[Cart]:
        """Remove a line by ID. Returns None when the line is absent."""
        cart = self.get_or_create_cart(user_id)
        if not self.find_item(user_id, item_id):
            return None

        cart.items = [i for i in cart.items if i.id != item_id]
        self._recalculate_totals(cart)
        return cart

    def remove_product(self, user_id: int, product_id: int) -> Optional[Cart]:
        """Remove the line holding a product. Returns None when absent."""
        item = self.find_product_item(user_id, product_id)
        if not item:
            return None
        return self.remove_item(user_id, item.id)

    def clear_cart(self, user_id: int) -> Cart:
        """Clear all items from the cart"""
        cart = self.get_or_create_cart(user_id)
        cart.items = []
        self._recalculate_totals(cart)
        return cart

    def _recalculate_totals(self, cart: Cart) -> None:
        """Recalculate cart totals"""
        cart.total = sum((item.subtotal for item in cart.items), Decimal("0.00"))
        cart.total_items = sum(item.quantity for item in cart.items)
        cart.updated_at = datetime.now(timezone.utc)


# Singleton instance
cart_db = CartDatabase()
