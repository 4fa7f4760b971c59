"""
Client-side snapshots of store-owned data.

Totals are always derived from the lines held here; totals sent by the
store are ignored so a displayed total can never disagree with the
displayed lines.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class Product(BaseModel):
    """Catalog snapshot. May be stale as soon as it is fetched."""
    id: int
    name: str
    price: Decimal = Field(ge=0)
    category: str = Field(min_length=1)
    stock: int = Field(ge=0, default=0)
    description: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    def matches(self, search_term: str) -> bool:
        """Case-insensitive substring match on name or description"""
        term = search_term.lower()
        if term in self.name.lower():
            return True
        return bool(self.description) and term in self.description.lower()


class CartLine(BaseModel):
    """One row of the cart"""
    id: int
    product_id: int = Field(alias="productId")
    product_name: str = Field(alias="productName")
    unit_price: Decimal = Field(alias="productPrice")
    quantity: int = Field(gt=0)

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


class Cart(BaseModel):
    """Local cache of the shopper's server-held cart"""
    id: Optional[int] = None
    lines: list[CartLine] = Field(default_factory=list, alias="items")

    class Config:
        populate_by_name = True
        frozen = True

    @classmethod
    def empty(cls) -> "Cart":
        """Canonical empty-cart shape"""
        return cls(id=None, lines=[])

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self.lines), Decimal("0.00"))

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def line(self, line_id: int) -> Optional[CartLine]:
        return next((line for line in self.lines if line.id == line_id), None)

    def line_for_product(self, product_id: int) -> Optional[CartLine]:
        return next((line for line in self.lines if line.product_id == product_id), None)


class OrderLine(BaseModel):
    """Snapshot of a cart line taken at checkout"""
    product_id: int = Field(alias="productId")
    product_name: str = Field(alias="productName")
    product_category: str = Field(alias="productCategory")
    unit_price: Decimal = Field(alias="productPrice")
    quantity: int
    total_price: Decimal = Field(alias="totalPrice")

    class Config:
        populate_by_name = True
        frozen = True


class Order(BaseModel):
    """Placed order. Immutable; rendered only from its own snapshot."""
    id: int
    user_id: Optional[int] = Field(default=None, alias="userId")
    created_at: datetime = Field(alias="createdAt")
    lines: list[OrderLine] = Field(alias="items")
    total: Decimal = Field(alias="totalAmount")
    total_items: int = Field(alias="totalItems")

    class Config:
        populate_by_name = True
        frozen = True
