"""
Inbound Call Route for Order Bot
================================

Endpoints:
----------
- POST /retell/inbound: Per-call dynamic variables for the voice agent

The vendor calls this before the agent answers with
{"agent_id", "from_number", "to_number"} and substitutes the returned
dynamic variables into the agent prompt. See services/inbound.py for what
the variables say.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_db
from ..logging_config import mask_phone
from ..schemas.webhooks import InboundCallRequest, InboundCallResponse
from ..services.inbound import build_inbound_config, find_restaurant_for_call


logger = logging.getLogger(__name__)

inbound_router = APIRouter(prefix="/retell", tags=["Voice Inbound"])


@inbound_router.post("/inbound", response_model=InboundCallResponse)
def retell_inbound(
    body: InboundCallRequest,
    db: Session = Depends(get_db),
) -> InboundCallResponse:
    restaurant = find_restaurant_for_call(db, body.agent_id, body.to_number)
    if not restaurant:
        logger.warning("Inbound call for unknown agent %s / number %s", body.agent_id, body.to_number)
        raise HTTPException(status_code=404, detail="Restaurant not found")

    logger.info("Inbound call to restaurant #%d from %s", restaurant.id, mask_phone(body.from_number))
    return InboundCallResponse(**build_inbound_config(db, restaurant, body.from_number))
