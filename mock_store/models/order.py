"""Order models for the reference store"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class OrderItem(BaseModel):
    """Snapshot of a cart line taken at checkout"""
    product_id: int = Field(alias="productId")
    product_name: str = Field(alias="productName")
    product_category: str = Field(alias="productCategory")
    product_price: Decimal = Field(alias="productPrice")
    quantity: int
    total_price: Decimal = Field(alias="totalPrice")

    class Config:
        populate_by_name = True
        frozen = True


class Order(BaseModel):
    """Placed order. Never modified after creation."""
    id: int
    user_id: int = Field(alias="userId")
    created_at: datetime = Field(alias="createdAt")
    items: list[OrderItem]
    total_amount: Decimal = Field(alias="totalAmount")
    total_items: int = Field(alias="totalItems")

    class Config:
        populate_by_name = True
        frozen = True
