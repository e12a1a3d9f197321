"""
Admin Call Routes for Order Bot
===============================

Staff endpoints for reviewing the phone calls behind orders.

Endpoints:
----------
- GET /admin/calls: List calls with pagination and filtering
- GET /admin/calls/{id}: Call detail with transcript and linked order

Authentication:
---------------
All endpoints require admin authentication via HTTP Basic Auth.

Filtering:
----------
- ?restaurant_id=1 - Only calls to one restaurant
- ?status=voicemail - Only calls in one status
- No filters - All calls

Calls are served from the local calls table, so a call that never reached
call_started (unknown dialed number) does not appear.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, selectinload

from ..auth import verify_admin_credentials
from ..db import get_db
from ..models import Call, CallStatus, Order
from ..schemas.calls import CallDetailOut, CallListResponse, CallSummaryOut


logger = logging.getLogger(__name__)

admin_calls_router = APIRouter(prefix="/admin/calls", tags=["Admin - Calls"])


@admin_calls_router.get("", response_model=CallListResponse)
def list_calls(
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
    restaurant_id: Optional[int] = Query(None, description="Filter by restaurant"),
    status: Optional[CallStatus] = Query(None, description="Filter by status, or leave empty for all"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> CallListResponse:
    """
    Return a paginated list of calls, newest first.

    Requires admin authentication.
    """
    query = db.query(Call)

    if restaurant_id is not None:
        query = query.filter(Call.restaurant_id == restaurant_id)
    if status is not None:
        query = query.filter(Call.status == status.value)

    total = query.count()
    offset = (page - 1) * page_size

    calls = (
        query.options(selectinload(Call.order))
        .order_by(Call.created_at.desc(), Call.id.desc())
        .offset(offset)
        .limit(page_size)
        .all()
    )

    items = [CallSummaryOut.model_validate(c) for c in calls]
    return CallListResponse(
        items=items,
        page=page,
        page_size=page_size,
        total=total,
        has_next=offset + len(items) < total,
    )


@admin_calls_router.get("/{call_id}", response_model=CallDetailOut)
def get_call_detail(
    call_id: int,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> CallDetailOut:
    call = (
        db.query(Call)
        .options(
            selectinload(Call.order).selectinload(Order.items),
            selectinload(Call.order).selectinload(Order.customer),
        )
        .filter(Call.id == call_id)
        .first()
    )
    if not call:
        raise HTTPException(status_code=404, detail="Call not found")

    return CallDetailOut.from_call(call)
