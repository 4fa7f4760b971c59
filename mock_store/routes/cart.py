"""Cart API routes for the reference store"""

from fastapi import APIRouter, HTTPException, Depends

from ..models.cart import Cart, AddToCartRequest, UpdateCartItemRequest
from ..database.carts import cart_db
from ..database.products import product_db
from ..security.auth import Identity, require_user

router = APIRouter(prefix="/api/cart", tags=["Cart"])


@router.get("", response_model=Cart)
async def get_cart(identity: Identity = Depends(require_user)):
    """Get the caller's cart"""
    return cart_db.get_or_create_cart(identity.user_id)


@router.post("", response_model=Cart)
async def add_to_cart(
    request: AddToCartRequest,
    identity: Identity = Depends(require_user),
):
    """Add a product to the cart, merging with an existing line"""
    product = product_db.get_product(request.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    existing = cart_db.find_product_item(identity.user_id, product.id)
    wanted = request.quantity + (existing.quantity if existing else 0)
    if wanted > product.stock:
        raise HTTPException(
            status_code=409,
            detail=f"Insufficient stock. Available: {product.stock}",
        )

    return cart_db.add_item(identity.user_id, product, request.quantity)


@router.put("/items/{item_id}", response_model=Cart)
async def update_cart_item(
    item_id: int,
    request: UpdateCartItemRequest,
    identity: Identity = Depends(require_user),
):
    """Set a line's quantity"""
    item = cart_db.find_item(identity.user_id, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not in cart")

    product = product_db.get_product(item.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    if request.quantity > product.stock:
        raise HTTPException(
            status_code=409,
            detail=f"Insufficient stock. Available: {product.stock}",
        )

    return cart_db.update_item_quantity(identity.user_id, item_id, request.quantity)


@router.delete("/items/{item_id}", response_model=Cart)
async def remove_cart_item(
    item_id: int,
    identity: Identity = Depends(require_user),
):
    """Remove one line by its ID"""
    cart = cart_db.remove_item(identity.user_id, item_id)
    if not cart:
        raise HTTPException(status_code=404, detail="Item not in cart")
    return cart


@router.delete("/products/{product_id}", response_model=Cart)
async def remove_cart_product(
    product_id: int,
    identity: Identity = Depends(require_user),
):
    """Remove the line holding a product"""
    cart = cart_db.remove_product(identity.user_id, product_id)
    if not cart:
        raise HTTPException(status_code=404, detail="Product not in cart")
    return cart


@router.delete("", response_model=Cart)
async def clear_cart(identity: Identity = Depends(require_user)):
    """Clear all items from the cart"""
    return cart_db.clear_cart(identity.user_id)
