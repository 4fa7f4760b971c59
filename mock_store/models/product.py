"""Product models for the reference store"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class Product(BaseModel):
    """Product in the catalog"""
    id: int
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: Decimal = Field(ge=0)
    category: str = Field(min_length=1)
    stock: int = Field(ge=0, default=0)
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    class Config:
        populate_by_name = True

    @property
    def in_stock(self) -> bool:
        return self.stock > 0


class ProductInput(BaseModel):
    """Create/update payload used by catalog administration"""
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: Decimal = Field(ge=0)
    category: str = Field(min_length=1)
    stock: int = Field(ge=0, default=0)
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    class Config:
        populate_by_name = True
