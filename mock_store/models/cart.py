"""Cart models for the reference store"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class CartItem(BaseModel):
    """Line in a shopping cart"""
    id: int
    product_id: int = Field(alias="productId")
    product_name: str = Field(alias="productName")
    product_price: Decimal = Field(alias="productPrice")
    quantity: int = Field(gt=0)
    subtotal: Decimal

    class Config:
        populate_by_name = True


class Cart(BaseModel):
    """Shopping cart, one per user"""
    id: int
    user_id: int = Field(alias="userId")
    items: list[CartItem] = []
    total: Decimal = Decimal("0.00")
    total_items: int = Field(default=0, alias="totalItems")
    updated_at: datetime = Field(alias="updatedAt")

    class Config:
        populate_by_name = True


class AddToCartRequest(BaseModel):
    """Request to add a product to the cart"""
    product_id: int = Field(alias="productId")
    quantity: int = Field(default=1, gt=0)

    class Config:
        populate_by_name = True


class UpdateCartItemRequest(BaseModel):
    """Request to change a line's quantity"""
    quantity: int = Field(gt=0)
