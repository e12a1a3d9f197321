"""
Call Lifecycle Service for Order Bot
====================================

Handlers for the voice vendor's call lifecycle events. The webhook route
verifies the signature and parses the envelope; everything after that lives
here.

Events:
-------
- call_started: Create the Call row for the restaurant owning the dialed number
- call_ended: Record terminal fields, then rebuild and persist the order
- call_analyzed: Attach post-call analysis

Unknown event types are ignored so new vendor events never fail a delivery.

Delivery Semantics:
-------------------
Deliveries are at-least-once and call_ended / call_analyzed may arrive in
either order. Each handler writes only its own columns, so neither clobbers
the other. Lookup misses (no restaurant for the dialed number, no Call row
for a later event) are logged and treated as no-ops. A call that already has
an order never gets a second one.

Call Status:
------------
The vendor's disconnection reason maps onto CallStatus:

    voicemail_reached                       -> voicemail
    dial_failed, call_failed, error, error_* -> error
    anything else (or missing)              -> completed
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from sqlalchemy.orm import Session

from ..logging_config import mask_phone
from ..models import Call, CallStatus, Restaurant
from ..schemas.webhooks import (
    CallAnalyzedData,
    CallEndedData,
    CallStartedData,
    RetellWebhookEvent,
)
from ..tasks.reducer import extract_order_from_transcript
from .order import persist_call_order


logger = logging.getLogger(__name__)

ERROR_DISCONNECT_REASONS = frozenset({"dial_failed", "call_failed", "error"})


def call_status_for_disconnect(reason: Optional[str]) -> CallStatus:
    """Map a vendor disconnection reason to the final call status."""
    if reason == "voicemail_reached":
        return CallStatus.VOICEMAIL
    if reason in ERROR_DISCONNECT_REASONS or (reason or "").startswith("error_"):
        return CallStatus.ERROR
    return CallStatus.COMPLETED


def _from_epoch_ms(value: Optional[int]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def find_call(db: Session, retell_call_id: str) -> Optional[Call]:
    return db.query(Call).filter(Call.retell_call_id == retell_call_id).first()


def handle_call_started(db: Session, data: Dict[str, Any]) -> Optional[Call]:
    """
    Create the Call row for a new inbound call.

    The restaurant is resolved from the dialed number. A repeat delivery for a
    call we already know returns the existing row unchanged.
    """
    payload = CallStartedData.model_validate(data)

    existing = find_call(db, payload.call_id)
    if existing:
        logger.info("call_started for known call %s, ignoring repeat delivery", payload.call_id)
        return existing

    restaurant = None
    if payload.to_number:
        restaurant = (
            db.query(Restaurant)
            .filter(Restaurant.retell_phone_number == payload.to_number)
            .first()
        )
    if not restaurant:
        logger.warning(
            "No restaurant found for dialed number %s (call %s)",
            payload.to_number, payload.call_id,
        )
        return None

    call = Call(
        restaurant_id=restaurant.id,
        retell_call_id=payload.call_id,
        caller_phone=payload.from_number or None,
        status=CallStatus.IN_PROGRESS.value,
        started_at=_from_epoch_ms(payload.start_timestamp) or _utcnow(),
    )
    db.add(call)
    db.commit()
    db.refresh(call)

    logger.info(
        "Call %s started for restaurant #%d from %s",
        payload.call_id, restaurant.id, mask_phone(payload.from_number),
    )
    return call


def handle_call_ended(db: Session, data: Dict[str, Any]) -> Optional[Call]:
    """
    Finalize a call and turn its tool calls into an order.

    Terminal fields are committed first, on their own. The order is then
    rebuilt from transcript_with_tool_calls and written in a separate
    transaction, unless the call already has one.
    """
    payload = CallEndedData.model_validate(data)

    call = find_call(db, payload.call_id)
    if not call:
        logger.warning("call_ended for unknown call %s, nothing to update", payload.call_id)
        return None

    status = call_status_for_disconnect(payload.disconnection_reason)
    call.status = status.value
    call.ended_at = _from_epoch_ms(payload.end_timestamp) or call.ended_at or _utcnow()
    call.duration_ms = payload.duration_ms or None
    call.transcript = payload.transcript or None
    call.recording_url = payload.recording_url or None
    call.disconnection_reason = payload.disconnection_reason
    db.commit()

    logger.info(
        "Call %s ended: status=%s, reason=%s, duration_ms=%s",
        payload.call_id, status.value, payload.disconnection_reason, payload.duration_ms,
    )

    # Re-read under a row lock so a concurrent delivery sees our order_id
    call = (
        db.query(Call)
        .filter(Call.id == call.id)
        .with_for_update()
        .populate_existing()
        .one()
    )
    if call.order_id is not None:
        logger.info("Call %s already linked to order #%d, skipping reconciliation", payload.call_id, call.order_id)
        db.commit()
        return call

    draft = extract_order_from_transcript(payload.transcript_with_tool_calls)
    if draft is None:
        logger.info("Call %s produced no order items", payload.call_id)
        db.commit()
        return call

    restaurant = db.get(Restaurant, call.restaurant_id)
    if restaurant is None:
        logger.warning("Restaurant #%d for call %s no longer exists", call.restaurant_id, payload.call_id)
        db.commit()
        return call

    persist_call_order(db, draft, restaurant, call)
    return call


def handle_call_analyzed(db: Session, data: Dict[str, Any]) -> Optional[Call]:
    """Attach post-call analysis. Only call_analysis is written."""
    payload = CallAnalyzedData.model_validate(data)

    call = find_call(db, payload.call_id)
    if not call:
        logger.warning("call_analyzed for unknown call %s, nothing to update", payload.call_id)
        return None

    call.call_analysis = payload.call_analysis
    db.commit()
    logger.info("Stored call analysis for call %s", payload.call_id)
    return call


EVENT_HANDLERS: Dict[str, Callable[[Session, Dict[str, Any]], Optional[Call]]] = {
    "call_started": handle_call_started,
    "call_ended": handle_call_ended,
    "call_analyzed": handle_call_analyzed,
}


def dispatch_webhook_event(db: Session, event: RetellWebhookEvent) -> Optional[Call]:
    """Route a verified lifecycle event to its handler."""
    handler = EVENT_HANDLERS.get(event.event)
    if handler is None:
        logger.info("Ignoring unhandled webhook event type: %s", event.event)
        return None
    return handler(db, event.data)
