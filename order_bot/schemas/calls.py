"""
Call Schemas for Order Bot
==========================

Pydantic models for the staff-facing call log.

Endpoint Coverage:
------------------
- GET /admin/calls: List calls with pagination and filtering
- GET /admin/calls/{id}: One call with its transcript, analysis and order

Everything here is read from the calls table as the lifecycle webhooks left
it. A call still in progress has no ended_at, duration or transcript yet.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict

from .orders import OrderDetailOut, OrderSummaryOut


class CallSummaryOut(BaseModel):
    """
    Response model for the call list.

    The linked order, when the call produced one, is included in summary
    form so staff can see the outcome without opening the call.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    restaurant_id: int
    retell_call_id: str
    caller_phone: Optional[str] = None
    status: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    duration_ms: Optional[int] = None
    disconnection_reason: Optional[str] = None
    customer_id: Optional[int] = None
    order_id: Optional[int] = None
    order: Optional[OrderSummaryOut] = None


class CallDetailOut(CallSummaryOut):
    """Adds the transcript, post-call analysis, recording and full order."""
    transcript: Optional[Any] = None
    call_analysis: Optional[Any] = None
    recording_url: Optional[str] = None
    order: Optional[OrderDetailOut] = None

    @classmethod
    def from_call(cls, call) -> "CallDetailOut":
        summary = CallSummaryOut.model_validate(call).model_dump(exclude={"order"})
        return cls(
            **summary,
            transcript=call.transcript,
            call_analysis=call.call_analysis,
            recording_url=call.recording_url,
            order=OrderDetailOut.from_order(call.order) if call.order else None,
        )


class CallListResponse(BaseModel):
    items: List[CallSummaryOut]
    page: int
    page_size: int
    total: int
    has_next: bool
