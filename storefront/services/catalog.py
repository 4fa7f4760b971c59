"""Catalog Query and catalog administration"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from ..core.errors import StorefrontError, ValidationFailed
from ..core.session import ShopperSession
from ..models import Product
from .feedback import OperationStatus, StatusTracker
from .store_client import StoreClient

logger = logging.getLogger(__name__)


@dataclass
class CatalogPage:
    """Result of a catalog query"""
    products: list[Product] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    error: Optional[StorefrontError] = None

    @property
    def load_failed(self) -> bool:
        """Tells "the store could not be read" apart from "no products match" """
        return self.error is not None


class CatalogQuery:
    """
    Lists products.

    The category filter is sent to the store; the search term is applied
    locally over the store's answer. Both filters must hold.
    """

    def __init__(self, store: StoreClient):
        self.store = store
        self.tracker = StatusTracker()
        self._categories: list[str] = []

    @property
    def status(self) -> OperationStatus:
        return self.tracker.status

    async def list_products(
        self,
        category: Optional[str] = None,
        search_term: Optional[str] = None,
    ) -> CatalogPage:
        """Fetch products; never raises for a store failure"""
        try:
            with self.tracker.track():
                products = await self.store.list_products(category)
        except StorefrontError as e:
            logger.error(f"Failed to load products (category={category!r}): {e.message}")
            self._categories = []
            return CatalogPage(error=e)

        if category is None:
            self._categories = list(dict.fromkeys(p.category for p in products))
        else:
            products = [p for p in products if p.category == category]

        if search_term:
            products = [p for p in products if p.matches(search_term)]

        return CatalogPage(products=products, categories=self.categories())

    def categories(self) -> list[str]:
        """Distinct categories seen in the last unfiltered fetch"""
        return list(self._categories)

    async def get_product(self, product_id: int) -> Product:
        with self.tracker.track():
            return await self.store.get_product(product_id)


class CatalogAdmin:
    """Product maintenance. The store only lets ADMIN accounts through."""

    def __init__(self, store: StoreClient, session: ShopperSession):
        self.store = store
        self.session = session
        self.tracker = StatusTracker()

    async def create_product(
        self,
        name: str,
        price: Decimal,
        category: str,
        stock: int = 0,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> Product:
        self.session.require_identity("manage products")
        payload = _product_payload(name, price, category, stock, description, image_url)
        with self.tracker.track():
            product = await self.store.create_product(payload)
        logger.info(f"Created product {product.id} ({product.name})")
        return product

    async def update_product(
        self,
        product_id: int,
        name: str,
        price: Decimal,
        category: str,
        stock: int = 0,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> Product:
        self.session.require_identity("manage products")
        payload = _product_payload(name, price, category, stock, description, image_url)
        with self.tracker.track():
            product = await self.store.update_product(product_id, payload)
        logger.info(f"Updated product {product_id}")
        return product

    async def delete_product(self, product_id: int) -> None:
        self.session.require_identity("manage products")
        with self.tracker.track():
            await self.store.delete_product(product_id)
        logger.info(f"Deleted product {product_id}")


def _product_payload(
    name: str,
    price: Decimal,
    category: str,
    stock: int,
    description: Optional[str],
    image_url: Optional[str],
) -> dict:
    if not name or not name.strip():
        raise ValidationFailed("Product name is required")
    if not category or not category.strip():
        raise ValidationFailed("Product category is required")
    if Decimal(price) < 0:
        raise ValidationFailed("Price cannot be negative")
    if stock < 0:
        raise ValidationFailed("Stock cannot be negative")

    return {
        "name": name.strip(),
        "price": Decimal(price),
        "category": category.strip(),
        "stock": stock,
        "description": description,
        "imageUrl": image_url,
    }
