# backend/routes/orders.py
import logging
from decimal import Decimal
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request, Query
from sqlalchemy.orm import Session, joinedload

from database import get_db
from utils.tokenJWT import get_current_user, role_required
from utils.audit import write_log
from models.users import User
from models.customer import Customer
from models.product import ProductVariant
from models.order import ORDER_STATUSES, Order, OrderItem
from schemas.order import (
    OrderCreatePayload, OrderItemOut, OrderResponse, OrdersPage, OrderStatusPatch,
)

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = logging.getLogger(__name__)

# Orders in these states can no longer change
FINAL_STATUSES = {"delivered", "cancelled"}


# Map Order model to OrderResponse schema
def _order_to_out(order: Order) -> OrderResponse:
    items: List[OrderItemOut] = []
    for it in order.items:
        items.append(OrderItemOut(
            variant_id=it.variant_id,
            product_name=it.product_name,
            unit_size=it.unit_size,
            qty=it.qty,
            unit_price=float(it.unit_price),
            line_total=round(float(it.unit_price) * it.qty, 2),
        ))
    return OrderResponse(
        id=order.id,
        user_id=order.user_id,
        customer_id=order.customer_id,
        status=order.status,
        total_amount=round(float(order.total_amount), 2),
        created_at=order.created_at,
        items=items,
    )

def _load_order(db: Session, order_id: int) -> Order:
    return db.query(Order).options(joinedload(Order.items)).filter(Order.id == order_id).first()

def _merge_lines(payload: OrderCreatePayload) -> Dict[int, int]:
    # The same variant listed twice is one line with the summed quantity
    merged: Dict[int, int] = {}
    for line in payload.items:
        merged[line.variant_id] = merged.get(line.variant_id, 0) + line.qty
    return merged


# Checkout: turn the cart into an order and reserve tracked stock
@router.post("", response_model=OrderResponse, status_code=201)
def create_order(
    payload: OrderCreatePayload,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not payload.items:
        raise HTTPException(status_code=400, detail="Cart is empty")

    if payload.customer_id is not None:
        if not db.query(Customer).filter(Customer.id == payload.customer_id).first():
            raise HTTPException(status_code=404, detail="Customer not found")

    lines = _merge_lines(payload)
    total = Decimal("0")
    order_items = []
    for variant_id, qty in lines.items():
        variant = db.query(ProductVariant).filter(ProductVariant.id == variant_id).with_for_update().first()
        if not variant:
            db.rollback()
            raise HTTPException(status_code=404, detail=f"Variant {variant_id} not found")

        # Untracked stock (NULL) is never decremented
        if variant.stock_quantity is not None:
            if qty > variant.stock_quantity:
                detail = f"Insufficient stock for: {variant.product.name} ({variant.unit_size})"
                db.rollback()
                raise HTTPException(status_code=400, detail=detail)
            variant.stock_quantity -= qty

        price = Decimal(str(variant.price))
        total += price * qty
        order_items.append(OrderItem(
            variant_id=variant.id,
            product_name=variant.product.name,
            unit_size=variant.unit_size,
            qty=qty,
            unit_price=price,
        ))

    order = Order(
        user_id=current_user.id,
        customer_id=payload.customer_id,
        status="pending",
        total_amount=total,
        items=order_items,
    )
    db.add(order)
    db.commit()

    cache = getattr(request.app.state, "catalog_cache", None)
    if cache is not None:
        cache.invalidate()

    write_log(
        db, user_id=current_user.id, action="ORDER_CREATE", resource="orders", status="SUCCESS",
        ip=request.client.host if request.client else None,
        resource_id=order.id, meta={"lines": len(order_items), "total": str(total)},
    )
    logger.info("Order %s created by user %s", order.id, current_user.id)
    return _order_to_out(_load_order(db, order.id))


# List all orders, newest first (Admin only)
@router.get("", response_model=OrdersPage)
def list_orders(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin")),
):
    q = db.query(Order).options(joinedload(Order.items)).order_by(Order.created_at.desc(), Order.id.desc())
    total = db.query(Order).count()
    rows = q.offset((page - 1) * page_size).limit(page_size).all()
    items = [_order_to_out(o) for o in rows]
    return {"items": items, "total": total, "page": page, "page_size": page_size}


# Change order status (Admin only)
@router.put("/{order_id}", response_model=OrderResponse)
def update_order_status(
    order_id: int,
    payload: OrderStatusPatch,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin")),
):
    new_status = payload.status.strip().lower()
    if new_status not in ORDER_STATUSES:
        raise HTTPException(status_code=400, detail=f"Unknown status: {payload.status}")

    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    old_status = order.status
    if old_status in FINAL_STATUSES and old_status != new_status:
        raise HTTPException(status_code=400, detail=f"Cannot change status from {old_status}")

    order.status = new_status
    db.commit()
    write_log(db, user_id=current_user.id, action="ORDER_STATUS_CHANGE", resource="orders", status="SUCCESS",
        ip=request.client.host if request.client else None,
        resource_id=order_id, meta={"old": old_status, "new": new_status})

    return _order_to_out(_load_order(db, order_id))
