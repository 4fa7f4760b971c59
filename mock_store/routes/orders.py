"""Order API routes for the reference store"""

import logging
from fastapi import APIRouter, HTTPException, Depends, Query

from ..models.order import Order
from ..database.carts import cart_db
from ..database.orders import order_db
from ..database.products import product_db
from ..security.auth import Identity, require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.post("/from-cart", response_model=Order, status_code=201)
async def create_order_from_cart(identity: Identity = Depends(require_user)):
    """
    Convert the caller's cart into an order.

    Either every line is in stock and the order is created, stock is
    decremented and the cart emptied, or nothing changes.
    """
    cart = cart_db.get_or_create_cart(identity.user_id)
    if not cart.items:
        raise HTTPException(status_code=400, detail="Cart is empty")

    # Check stock for every line before touching anything
    for item in cart.items:
        product = product_db.get_product(item.product_id)
        if not product or product.stock < item.quantity:
            raise HTTPException(
                status_code=409,
                detail=f"Insufficient stock for {item.product_name}",
            )

    for item in cart.items:
        product_db.update_stock(item.product_id, -item.quantity)

    order = order_db.create_order(cart, product_db.products)
    cart_db.clear_cart(identity.user_id)

    logger.info(
        f"Order {order.id} created for {identity.email}: "
        f"{order.total_items} items, ${order.total_amount}"
    )
    return order


@router.get("", response_model=list[Order])
async def list_orders(
    limit: int = Query(50, ge=1, le=200),
    identity: Identity = Depends(require_user),
):
    """List the caller's orders, newest first"""
    return order_db.list_orders(identity.user_id, limit=limit)


@router.get("/{order_id}", response_model=Order)
async def get_order(order_id: int, identity: Identity = Depends(require_user)):
    """Get one of the caller's orders"""
    order = order_db.get_order(order_id)
    if not order or order.user_id != identity.user_id:
        raise HTTPException(status_code=404, detail="Order not found")
    return order
