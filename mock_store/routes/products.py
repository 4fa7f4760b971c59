"""Product API routes for the reference store"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from ..models.product import Product, ProductInput
from ..database.orders import order_db
from ..database.products import product_db
from ..security.auth import Identity, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=list[Product])
async def list_products(
    category: Optional[str] = Query(None, description="Exact category filter"),
):
    """List the catalog. Anonymous access is allowed."""
    return product_db.list_products(category=category)


@router.get("/categories", response_model=list[str])
async def list_categories():
    """List distinct product categories"""
    return product_db.list_categories()


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: int):
    """Get a product by ID"""
    product = product_db.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("", response_model=Product, status_code=201)
async def create_product(
    request: ProductInput,
    admin: Identity = Depends(require_admin),
):
    """Add a product to the catalog (admin only)"""
    if any(p.name.lower() == request.name.lower() for p in product_db.list_products()):
        raise HTTPException(status_code=409, detail="A product with this name already exists")

    product = product_db.create_product(request)
    logger.info(f"Product {product.id} created by {admin.email}")
    return product


@router.put("/{product_id}", response_model=Product)
async def update_product(
    product_id: int,
    request: ProductInput,
    admin: Identity = Depends(require_admin),
):
    """Replace a product's details (admin only)"""
    product = product_db.update_product(product_id, request)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    logger.info(f"Product {product_id} updated by {admin.email}")
    return product


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: int,
    admin: Identity = Depends(require_admin),
):
    """Remove a product that no order references (admin only)"""
    if not product_db.get_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")

    if order_db.references_product(product_id):
        raise HTTPException(
            status_code=409,
            detail="Cannot delete this product because it is referenced in existing orders",
        )

    product_db.delete_product(product_id)
    logger.info(f"Product {product_id} deleted by {admin.email}")
    return Response(status_code=204)
