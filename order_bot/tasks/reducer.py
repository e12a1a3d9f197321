"""
Order-state reducer.

Folds tool events, in transcript order, into a single DraftOrder:

- add_to_order: append a new item
- remove_from_order: drop every item whose name equals the given name,
  case-insensitively (exact names only; no fuzzy matching here)
- set_order_type: overwrite pickup/delivery
- set_delivery_address: overwrite the address
- set_customer_info: overwrite only the fields the event provides

Other tool names are ignored. A draft with no items means no order was placed.
"""

import logging
from typing import Any, Optional

from .models import (
    AddToOrderArgs,
    DraftOrder,
    DraftOrderItem,
    RemoveFromOrderArgs,
    SetCustomerInfoArgs,
    SetDeliveryAddressArgs,
    SetOrderTypeArgs,
    ToolEvent,
)
from .tool_events import extract_tool_events, parse_tool_args

logger = logging.getLogger(__name__)


def apply_tool_event(order: DraftOrder, event: ToolEvent) -> DraftOrder:
    """Apply one event to the draft in place and return it."""
    args = parse_tool_args(event)
    if args is None:
        return order

    if isinstance(args, AddToOrderArgs):
        order.items.append(DraftOrderItem(
            name=args.item_name,
            quantity=args.quantity,
            modifiers=list(args.modifiers),
            special_instructions=args.special_instructions,
        ))

    elif isinstance(args, RemoveFromOrderArgs):
        remove_name = args.item_name.lower()
        before = len(order.items)
        order.items = [i for i in order.items if i.name.lower() != remove_name]
        if len(order.items) == before:
            logger.debug("remove_from_order matched nothing for %r", args.item_name)

    elif isinstance(args, SetOrderTypeArgs):
        order.order_type = args.order_type

    elif isinstance(args, SetDeliveryAddressArgs):
        order.delivery_address = args.address

    elif isinstance(args, SetCustomerInfoArgs):
        if args.name:
            order.customer_name = args.name
        if args.phone:
            order.customer_phone = args.phone

    return order


def reduce_tool_events(events: list[ToolEvent]) -> Optional[DraftOrder]:
    """
    Build the draft order for a call.

    Returns:
        The DraftOrder, or None when the events leave the cart empty
    """
    order = DraftOrder()
    for event in events:
        apply_tool_event(order, event)

    if not order.items:
        return None
    return order


def extract_order_from_transcript(transcript: Optional[list[Any]]) -> Optional[DraftOrder]:
    """Normalize a transcript-with-tool-calls array and reduce it to a draft."""
    return reduce_tool_events(extract_tool_events(transcript))
