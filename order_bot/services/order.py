"""
Order Persistence Service for Order Bot
=======================================

This module turns a reconciled draft order into database rows once a call
has ended.

Key Functions:
--------------
- persist_call_order: Upsert the customer, create the Order and its
  OrderItems, and link the Call back to both

Transaction Boundary:
---------------------
Everything persist_call_order writes (customer, order, items, call
back-reference) happens in one transaction. Rows are flushed as they are
built so ids are available, and a single commit runs at the end. If any step
raises, the whole transaction is rolled back and the error is re-raised, so a
failure can never leave an order without items, items without an order, or
a call pointing at a half-written order.

Idempotency:
------------
Vendors deliver webhooks at least once. If the call already has an order_id
the existing order is returned and nothing is written.

Totals:
-------
- unit_price = matched menu price, 0 when the spoken item is not on the menu
- item_total = (unit_price + modifier surcharges) * quantity
- subtotal = sum(item_total), tax = subtotal * tax_rate
- delivery_fee added for delivery orders
- total = subtotal + tax + delivery_fee, each rounded to cents
"""

import logging
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from ..logging_config import mask_phone
from ..models import Call, Order, OrderItem, OrderStatus, Restaurant
from ..tasks.menu_lookup import load_catalog
from ..tasks.models import CatalogItem, DraftOrder, ResolvedOrderItem
from ..tasks.pricing import price_order, resolve_order_items
from .customer import upsert_customer


logger = logging.getLogger(__name__)


def persist_call_order(
    db: Session,
    draft: DraftOrder,
    restaurant: Restaurant,
    call: Call,
    catalog: Optional[Sequence[CatalogItem]] = None,
) -> Order:
    """
    Price a draft order and write it, atomically, for a finished call.

    Args:
        db: Database session (committed on success, rolled back on failure)
        draft: Non-empty draft order reduced from the call's tool events
        restaurant: The restaurant the call belongs to
        call: The call record; receives order_id and customer_id
        catalog: Menu snapshot; loaded fresh from the database when omitted

    Returns:
        The new Order, or the call's existing order on a repeat delivery
    """
    if call.order_id is not None:
        existing = db.get(Order, call.order_id)
        if existing is not None:
            logger.info("Call %s already has order #%d, not creating another", call.retell_call_id, existing.id)
            return existing

    if not draft.items:
        raise ValueError("Cannot persist an order with no items")

    try:
        if catalog is None:
            catalog = load_catalog(db, restaurant.id)

        customer_phone = call.caller_phone or draft.customer_phone
        customer = upsert_customer(db, restaurant.id, customer_phone, draft.customer_name)

        resolved = resolve_order_items(draft, catalog)
        totals = price_order(draft, resolved, restaurant.tax_rate, restaurant.delivery_fee)

        logger.info(
            "Order total: subtotal=$%.2f, tax=$%.2f (%.3f%%), delivery=$%.2f, total=$%.2f",
            totals.subtotal, totals.tax, (restaurant.tax_rate or 0.0) * 100, totals.delivery_fee, totals.total,
        )

        order = Order(
            restaurant_id=restaurant.id,
            customer_id=customer.id if customer else None,
            call_id=call.id,
            order_type=draft.order_type,
            status=OrderStatus.PENDING.value,
            delivery_address=draft.delivery_address if draft.is_delivery else None,
            subtotal=totals.subtotal,
            tax=totals.tax,
            delivery_fee=totals.delivery_fee,
            total=totals.total,
        )
        db.add(order)
        db.flush()

        _add_order_items(db, order, resolved)

        call.order_id = order.id
        call.customer_id = customer.id if customer else None
        db.flush()

        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Order write failed for call %s, rolled back", call.retell_call_id)
        raise

    logger.info(
        "Order #%d persisted for call %s (%d items, customer %s)",
        order.id, call.retell_call_id, len(resolved), mask_phone(customer.phone if customer else None),
    )
    return order


def _add_order_items(db: Session, order: Order, items: Sequence[ResolvedOrderItem]) -> None:
    """Add priced line items to an order. Modifiers are stored as a JSON list."""
    for it in items:
        db.add(OrderItem(
            order_id=order.id,
            menu_item_id=it.menu_item_id,
            name=it.name,
            quantity=it.quantity,
            unit_price=it.unit_price,
            modifiers=[m.model_dump() for m in it.modifiers],
            item_total=it.item_total,
            special_instructions=it.special_instructions,
        ))
    db.flush()
