"""
Live Tool-Call Route for Order Bot
==================================

The voice agent calls this endpoint each time it invokes a tool during a live
call. The reply is a short sentence the agent can use to keep the
conversation going; nothing is stored here. The order itself is rebuilt from
the transcript once the call ends (see routes/webhooks.py).

Endpoints:
----------
- POST /tools/retell: {"name": "...", "args": {...}} -> {"result": "..."}
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter

from ..schemas.webhooks import ToolCallRequest, ToolCallResponse


logger = logging.getLogger(__name__)

tools_router = APIRouter(prefix="/tools", tags=["Voice Tools"])

DEFAULT_ACK = "Done."


def tool_acknowledgement(name: str, args: Optional[Dict[str, Any]]) -> str:
    """Human-readable acknowledgement for a live tool call."""
    args = args or {}
    if name == "add_to_order":
        return f"Added {args.get('quantity') or 1}x {args.get('item_name')} to the order."
    if name == "remove_from_order":
        return f"Removed {args.get('item_name')} from the order."
    if name == "get_order_summary":
        return "Order summary noted."
    if name == "set_order_type":
        return f"Order type set to {args.get('order_type')}."
    if name == "set_delivery_address":
        return f"Delivery address set to {args.get('address')}."
    if name == "set_customer_info":
        return "Customer info recorded."
    return DEFAULT_ACK


@tools_router.post("/retell", response_model=ToolCallResponse)
def retell_tool_call(body: ToolCallRequest) -> ToolCallResponse:
    logger.debug("Live tool call: %s", body.name)
    return ToolCallResponse(result=tool_acknowledgement(body.name, body.args))
