# Reference store models

from .product import Product, ProductInput
from .cart import Cart, CartItem, AddToCartRequest, UpdateCartItemRequest
from .order import Order, OrderItem
from .user import (
    User,
    UserRole,
    LoginRequest,
    RegisterRequest,
    AuthResponse,
    ErrorResponse,
)

__all__ = [
    "Product",
    "ProductInput",
    "Cart",
    "CartItem",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "Order",
    "OrderItem",
    "User",
    "UserRole",
    "LoginRequest",
    "RegisterRequest",
    "AuthResponse",
    "ErrorResponse",
]
