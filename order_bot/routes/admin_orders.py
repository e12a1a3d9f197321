"""
Admin Orders Routes for Order Bot
=================================

Staff endpoints for viewing phone orders and moving them through the kitchen.

Endpoints:
----------
- GET /admin/orders: List orders with pagination and filtering
- GET /admin/orders/{id}: Get detailed order information
- PATCH /admin/orders/{id}/status: Change an order's status

Authentication:
---------------
All endpoints require admin authentication via HTTP Basic Auth.

Filtering:
----------
- ?restaurant_id=1 - Only orders for one restaurant
- ?status=pending - Only orders in one status
- No filters - All orders

Pagination:
-----------
Uses page/page_size parameters:
- ?page=1&page_size=20
- Returns total count and has_next flag for navigation

Status Changes:
---------------
Setting a status stamps the matching timestamp the first time it is reached:
confirmed -> confirmed_at, ready -> ready_at, completed -> completed_at,
cancelled -> cancelled_at. Totals are never recalculated.

Usage:
------
    GET /admin/orders?restaurant_id=1&status=pending&page=1&page_size=20
    GET /admin/orders/123
    PATCH /admin/orders/123/status  {"status": "confirmed"}
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, selectinload

from ..auth import verify_admin_credentials
from ..db import get_db
from ..models import Order, OrderStatus
from ..schemas.orders import (
    OrderDetailOut,
    OrderListResponse,
    OrderStatusUpdate,
    OrderSummaryOut,
)


logger = logging.getLogger(__name__)

# Router definition
admin_orders_router = APIRouter(prefix="/admin/orders", tags=["Admin - Orders"])

STATUS_TIMESTAMPS = {
    OrderStatus.CONFIRMED: "confirmed_at",
    OrderStatus.READY: "ready_at",
    OrderStatus.COMPLETED: "completed_at",
    OrderStatus.CANCELLED: "cancelled_at",
}


# =============================================================================
# Order Endpoints
# =============================================================================

@admin_orders_router.get("", response_model=OrderListResponse)
def list_orders(
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
    restaurant_id: Optional[int] = Query(None, description="Filter by restaurant"),
    status: Optional[OrderStatus] = Query(None, description="Filter by status, or leave empty for all"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> OrderListResponse:
    """
    Return a paginated list of orders.

    Requires admin authentication. Orders are sorted newest first.
    """
    query = db.query(Order)

    if restaurant_id is not None:
        query = query.filter(Order.restaurant_id == restaurant_id)
    if status is not None:
        query = query.filter(Order.status == status.value)

    total = query.count()
    offset = (page - 1) * page_size

    orders = (
        query.order_by(Order.created_at.desc(), Order.id.desc())
        .offset(offset)
        .limit(page_size)
        .all()
    )

    items = [OrderSummaryOut.model_validate(o) for o in orders]
    has_next = offset + len(items) < total

    return OrderListResponse(
        items=items,
        page=page,
        page_size=page_size,
        total=total,
        has_next=has_next,
    )


@admin_orders_router.get("/{order_id}", response_model=OrderDetailOut)
def get_order_detail(
    order_id: int,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> OrderDetailOut:
    """
    Get detailed information about a specific order.

    Requires admin authentication. Returns the order with its customer and
    all line items.
    """
    order = (
        db.query(Order)
        .options(selectinload(Order.items), selectinload(Order.customer))
        .filter(Order.id == order_id)
        .first()
    )
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    return OrderDetailOut.from_order(order)


@admin_orders_router.patch("/{order_id}/status", response_model=OrderDetailOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> OrderDetailOut:
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    previous = order.status
    order.status = payload.status.value

    stamp_field = STATUS_TIMESTAMPS.get(payload.status)
    if stamp_field and getattr(order, stamp_field) is None:
        setattr(order, stamp_field, datetime.now(timezone.utc))

    db.commit()
    db.refresh(order)

    logger.info("Order #%d status %s -> %s", order.id, previous, order.status)
    return OrderDetailOut.from_order(order)
