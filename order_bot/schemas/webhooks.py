"""
Voice Webhook Schemas for Order Bot
===================================

Pydantic models for the payloads the voice vendor (Retell) posts to us.

Endpoint Coverage:
------------------
- POST /webhooks/retell: Call lifecycle events (signed)
- POST /tools/retell: Live tool calls during a call
- POST /retell/inbound: Per-call configuration before the agent answers

Lifecycle Events:
-----------------
Every lifecycle delivery is an envelope `{"event": ..., "data": {...}}`.
The envelope is parsed first; `data` is then validated against the model
for that event type. Vendor payloads carry many more fields than we read,
so every model ignores unknown keys.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RetellWebhookEvent(BaseModel):
    """
    Envelope for a lifecycle webhook delivery.

    Attributes:
        event: Event type (call_started, call_ended, call_analyzed, ...)
        data: Event payload, validated later per event type
    """
    model_config = ConfigDict(extra="ignore")

    event: str
    data: Dict[str, Any] = Field(default_factory=dict)


class CallStartedData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    call_id: str
    to_number: Optional[str] = None
    from_number: Optional[str] = None
    start_timestamp: Optional[int] = None  # epoch ms


class CallEndedData(BaseModel):
    """
    Terminal payload for a call.

    `transcript` is the plain conversation kept for staff review;
    `transcript_with_tool_calls` is the entry list the order is rebuilt from.
    """
    model_config = ConfigDict(extra="ignore")

    call_id: str
    disconnection_reason: Optional[str] = None
    duration_ms: Optional[int] = None
    transcript: Optional[Any] = None
    transcript_with_tool_calls: Optional[List[Any]] = None
    recording_url: Optional[str] = None
    end_timestamp: Optional[int] = None  # epoch ms


class CallAnalyzedData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    call_id: str
    call_analysis: Optional[Any] = None


class ToolCallRequest(BaseModel):
    """A live tool invocation forwarded by the voice agent."""
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    args: Optional[Dict[str, Any]] = None


class ToolCallResponse(BaseModel):
    result: str


class InboundCallRequest(BaseModel):
    """
    Sent once before the agent picks up an inbound call.

    Attributes:
        agent_id: Vendor agent answering the call
        from_number: Caller's phone number
        to_number: Number the caller dialed
    """
    model_config = ConfigDict(extra="ignore")

    agent_id: Optional[str] = None
    from_number: Optional[str] = None
    to_number: Optional[str] = None


class InboundCallResponse(BaseModel):
    dynamic_variables: Dict[str, str]
    metadata: Dict[str, Any]


class WebhookAck(BaseModel):
    received: bool = True
