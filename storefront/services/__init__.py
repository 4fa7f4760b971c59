# Storefront services

from .store_client import StoreClient
from .catalog import CatalogAdmin, CatalogPage, CatalogQuery
from .cart import CartState
from .checkout import CheckoutTransition
from .orders import OrderHistory
from .feedback import OperationStatus, StatusTracker, failure_message

__all__ = [
    "StoreClient",
    "CatalogAdmin",
    "CatalogPage",
    "CatalogQuery",
    "CartState",
    "CheckoutTransition",
    "OrderHistory",
    "OperationStatus",
    "StatusTracker",
    "failure_message",
]
