"""
Call-to-order reconciliation.

Rebuilds what a caller ordered from the tool calls the voice agent made:

    transcript -> tool_events.extract_tool_events -> list[ToolEvent]
               -> reducer.reduce_tool_events      -> DraftOrder | None
               -> pricing.resolve_order_items     -> list[ResolvedOrderItem]

menu_lookup resolves spoken item names against a snapshot of the catalog.
Nothing in this package writes to the database.
"""

from .models import (
    ToolEvent,
    ModifierSelection,
    AddToOrderArgs,
    RemoveFromOrderArgs,
    SetOrderTypeArgs,
    SetDeliveryAddressArgs,
    SetCustomerInfoArgs,
    GetOrderSummaryArgs,
    TOOL_ARG_SCHEMAS,
    DraftOrderItem,
    DraftOrder,
    CatalogItem,
    ResolvedOrderItem,
)

from .tool_events import (
    ToolArgumentsError,
    decode_arguments,
    extract_tool_events,
    parse_tool_args,
)

from .reducer import (
    apply_tool_event,
    reduce_tool_events,
    extract_order_from_transcript,
)

from .menu_lookup import (
    word_overlap_score,
    match_menu_item,
    load_catalog,
)

from .pricing import (
    resolve_order_item,
    resolve_order_items,
    price_order,
)

__all__ = [
    # Models
    "ToolEvent",
    "ModifierSelection",
    "AddToOrderArgs",
    "RemoveFromOrderArgs",
    "SetOrderTypeArgs",
    "SetDeliveryAddressArgs",
    "SetCustomerInfoArgs",
    "GetOrderSummaryArgs",
    "TOOL_ARG_SCHEMAS",
    "DraftOrderItem",
    "DraftOrder",
    "CatalogItem",
    "ResolvedOrderItem",
    # Normalization
    "ToolArgumentsError",
    "decode_arguments",
    "extract_tool_events",
    "parse_tool_args",
    # Reduction
    "apply_tool_event",
    "reduce_tool_events",
    "extract_order_from_transcript",
    # Matching
    "word_overlap_score",
    "match_menu_item",
    "load_catalog",
    # Pricing
    "resolve_order_item",
    "resolve_order_items",
    "price_order",
]
