"""Storefront client: catalog browsing, cart reconciliation and checkout."""

from .core.errors import (
    AuthRequired,
    Conflict,
    FailureKind,
    NotFound,
    PermissionDenied,
    StorefrontError,
    TransientFailure,
    ValidationFailed,
)
from .models import Cart, CartLine, Order, OrderLine, Product
from .storefront import Storefront

__all__ = [
    "AuthRequired",
    "Conflict",
    "FailureKind",
    "NotFound",
    "PermissionDenied",
    "StorefrontError",
    "TransientFailure",
    "ValidationFailed",
    "Cart",
    "CartLine",
    "Order",
    "OrderLine",
    "Product",
    "Storefront",
]
