"""
Order Schemas for Order Bot
===========================

Pydantic models for the staff-facing order views.

Endpoint Coverage:
------------------
- GET /admin/orders: List orders with pagination and filtering
- GET /admin/orders/{id}: Get detailed order information
- PATCH /admin/orders/{id}/status: Move an order through its lifecycle

Order Lifecycle:
----------------
1. **Pending**: Created from a finished call, waiting for staff
2. **Confirmed**: Staff accepted the order
3. **Preparing**: Kitchen is working on it
4. **Ready**: Ready for pickup or out for delivery
5. **Completed**: Handed over
6. **Cancelled**: Will not be fulfilled

Money fields (subtotal, tax, delivery_fee, total) are fixed when the order is
created; status changes never touch them.

Usage:
------
    orders = OrderListResponse(
        items=[OrderSummaryOut.model_validate(order) for order in db_orders],
        page=1,
        page_size=20,
        total=100,
        has_next=True
    )
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..models import OrderStatus


class OrderItemOut(BaseModel):
    """
    Response model for an individual order line item.

    Attributes:
        id: Database primary key
        menu_item_id: Catalog item, or None if the spoken name was not matched
        name: Catalog name when matched, otherwise what the customer said
        quantity: Number of this item ordered
        unit_price: Base price per item (0 for unmatched items)
        modifiers: Selected modifiers as [{"group", "option", "price"}]
        item_total: (unit_price + modifier prices) * quantity
        special_instructions: Free-text notes ("no onions")
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    menu_item_id: Optional[int] = None
    name: str
    quantity: int
    unit_price: float
    modifiers: List[Dict[str, Any]] = []
    item_total: float
    special_instructions: Optional[str] = None

    @field_validator("modifiers", mode="before")
    @classmethod
    def default_modifiers(cls, v):
        return v or []


class OrderSummaryOut(BaseModel):
    """
    Response model for order list/summary view.

    Contains key order information without the item details.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    restaurant_id: int
    customer_id: Optional[int] = None
    call_id: Optional[int] = None
    status: str
    order_type: str
    delivery_address: Optional[str] = None
    subtotal: float
    tax: float
    delivery_fee: float
    total: float
    created_at: Optional[datetime] = None


class OrderDetailOut(OrderSummaryOut):
    """
    Response model for detailed order view.

    Adds the customer, lifecycle timestamps and the full list of items.
    """
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    ready_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    items: List[OrderItemOut]

    @classmethod
    def from_order(cls, order) -> "OrderDetailOut":
        summary = OrderSummaryOut.model_validate(order)
        return cls(
            **summary.model_dump(),
            customer_name=order.customer.name if order.customer else None,
            customer_phone=order.customer.phone if order.customer else None,
            confirmed_at=order.confirmed_at,
            ready_at=order.ready_at,
            completed_at=order.completed_at,
            cancelled_at=order.cancelled_at,
            items=[OrderItemOut.model_validate(item) for item in order.items],
        )


class OrderListResponse(BaseModel):
    """
    Paginated response for order listing.

    Example:
        {
            "items": [...],
            "page": 1,
            "page_size": 20,
            "total": 157,
            "has_next": true
        }
    """
    items: List[OrderSummaryOut]
    page: int
    page_size: int
    total: int
    has_next: bool


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
