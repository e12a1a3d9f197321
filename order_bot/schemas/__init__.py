"""
Schemas Package for Order Bot
=============================

Pydantic models used for API request validation and response serialization.

Schema Organization:
--------------------
- **webhooks.py**: Voice vendor lifecycle, tool-call and inbound payloads
- **menu.py**: Scraped menu structure and import results
- **orders.py**: Order and order item views
- **calls.py**: Call log views

Naming Conventions:
-------------------
- *Out: Response models (e.g., OrderDetailOut) - what API returns
- *Request: Request bodies (e.g., ScrapeRequest)
- *Response: Response wrappers (e.g., OrderListResponse)
- *Data: Per-event webhook payloads (e.g., CallEndedData)
"""

# Webhook schemas
from .webhooks import (
    RetellWebhookEvent,
    CallStartedData,
    CallEndedData,
    CallAnalyzedData,
    ToolCallRequest,
    ToolCallResponse,
    InboundCallRequest,
    InboundCallResponse,
    WebhookAck,
)

# Menu schemas
from .menu import (
    ExtractedMenu,
    ExtractedCategory,
    ExtractedItem,
    ExtractedModifierGroup,
    ExtractedModifierOption,
    ScrapeRequest,
    ScrapeResponse,
    MenuImportResult,
)

# Order schemas
from .orders import (
    OrderItemOut,
    OrderSummaryOut,
    OrderDetailOut,
    OrderListResponse,
    OrderStatusUpdate,
)

# Call schemas
from .calls import (
    CallSummaryOut,
    CallDetailOut,
    CallListResponse,
)

__all__ = [
    # Webhooks
    "RetellWebhookEvent",
    "CallStartedData",
    "CallEndedData",
    "CallAnalyzedData",
    "ToolCallRequest",
    "ToolCallResponse",
    "InboundCallRequest",
    "InboundCallResponse",
    "WebhookAck",
    # Menu
    "ExtractedMenu",
    "ExtractedCategory",
    "ExtractedItem",
    "ExtractedModifierGroup",
    "ExtractedModifierOption",
    "ScrapeRequest",
    "ScrapeResponse",
    "MenuImportResult",
    # Orders
    "OrderItemOut",
    "OrderSummaryOut",
    "OrderDetailOut",
    "OrderListResponse",
    "OrderStatusUpdate",
    # Calls
    "CallSummaryOut",
    "CallDetailOut",
    "CallListResponse",
]
