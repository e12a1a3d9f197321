"""
Pricing for draft orders.

Each draft item is matched against the catalog snapshot and priced:

    unit_price  = matched base price, or 0 when unresolved
    item_total  = (unit_price + sum(modifier prices)) * quantity

Unresolved items keep the name the customer used and are priced at zero so
staff can still see and correct them.
"""

import logging
from typing import Sequence

from ..services.tax_utils import OrderTotals, calculate_order_total
from .menu_lookup import match_menu_item
from .models import CatalogItem, DraftOrder, DraftOrderItem, ResolvedOrderItem

logger = logging.getLogger(__name__)


def resolve_order_item(item: DraftOrderItem, catalog: Sequence[CatalogItem]) -> ResolvedOrderItem:
    match = match_menu_item(item.name, catalog)
    unit_price = match.base_price if match else 0.0
    item_total = (unit_price + item.modifier_total) * item.quantity

    return ResolvedOrderItem(
        menu_item_id=match.id if match else None,
        name=match.name if match else item.name,
        quantity=item.quantity,
        unit_price=unit_price,
        modifiers=list(item.modifiers),
        item_total=item_total,
        special_instructions=item.special_instructions,
    )


def resolve_order_items(order: DraftOrder, catalog: Sequence[CatalogItem]) -> list[ResolvedOrderItem]:
    """Match and price every draft item, keeping unresolved ones."""
    resolved = [resolve_order_item(item, catalog) for item in order.items]

    unresolved = [r.name for r in resolved if not r.is_resolved]
    if unresolved:
        logger.warning("%d item(s) not on the menu, priced at 0: %s", len(unresolved), unresolved)
    return resolved


def price_order(
    order: DraftOrder,
    items: Sequence[ResolvedOrderItem],
    tax_rate: float,
    delivery_fee: float,
) -> OrderTotals:
    return calculate_order_total(
        (i.item_total for i in items),
        tax_rate=tax_rate,
        delivery_fee=delivery_fee,
        is_delivery=order.is_delivery,
    )
