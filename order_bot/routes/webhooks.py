"""
Voice Webhook Routes for Order Bot
==================================

Receives call lifecycle events from the voice vendor.

Endpoints:
----------
- POST /webhooks/retell: call_started, call_ended, call_analyzed

Request Handling:
-----------------
1. The raw body is read and its `x-retell-signature` verified before
   anything is parsed. Bad signature -> 401, nothing written.
2. The body is parsed into {"event", "data"}. Bad JSON -> 400.
3. The event is dispatched to its handler in services.calls. Unknown event
   types are acknowledged and ignored.

Any exception raised while handling the event is logged with its traceback
and answered with 500 {"error": "Internal error"} so the vendor retries the
delivery. Handlers are safe to re-run for the same call.
"""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..auth import verify_retell_signature
from ..db import get_db
from ..schemas.webhooks import RetellWebhookEvent, WebhookAck
from ..services.calls import dispatch_webhook_event


logger = logging.getLogger(__name__)

webhooks_router = APIRouter(prefix="/webhooks", tags=["Webhooks"])


@webhooks_router.post("/retell", response_model=WebhookAck)
async def retell_webhook(
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Handle a call lifecycle event from the voice vendor.

    Returns {"received": true} once the event has been processed (or ignored).
    """
    raw_body = await request.body()
    verify_retell_signature(raw_body, request.headers.get("x-retell-signature"))

    try:
        payload = json.loads(raw_body)
        event = RetellWebhookEvent.model_validate(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error("Failed to parse webhook JSON: %s", e)
        raise HTTPException(status_code=400, detail="Invalid JSON")
    except ValidationError as e:
        logger.error("Malformed webhook envelope: %s", e)
        raise HTTPException(status_code=400, detail="Invalid payload")

    logger.info("Webhook received: %s", event.event)

    try:
        dispatch_webhook_event(db, event)
    except ValidationError as e:
        logger.error("Malformed %s payload: %s", event.event, e)
        raise HTTPException(status_code=400, detail="Invalid payload")
    except Exception:
        logger.exception("Error handling %s", event.event)
        return JSONResponse(status_code=500, content={"error": "Internal error"})

    return WebhookAck(received=True)
