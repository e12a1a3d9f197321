"""
Per-call agent configuration for inbound calls.

Before the agent answers, the voice vendor asks which restaurant the call is
for and what the agent should know about it right now. The answer is a set
of dynamic variables substituted into the agent prompt:

- store_status: open (with closing time) or closed
- returning_customer: greet a known caller by name
- delivery_note: pickup-only restaurants

Business hours are stored per weekday as {"mon": {"open": "09:00",
"close": "22:00"}, ...} in the restaurant's local time. A day with no entry
is treated as open.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy.orm import Session

from ..logging_config import mask_phone
from ..models import Restaurant
from .customer import find_customer


logger = logging.getLogger(__name__)

DAY_KEYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

CLOSED_STATUS = (
    "The restaurant is currently CLOSED. Politely inform the caller of the "
    "business hours and that they cannot place an order right now."
)
OPEN_STATUS = "The restaurant is currently OPEN."
OPEN_UNTIL_STATUS = "The restaurant is currently OPEN and closes at {close}."
RETURNING_CUSTOMER = "This is a returning customer named {name}. Greet them by name."
PICKUP_ONLY_NOTE = (
    "This restaurant only offers pickup. If the customer asks for delivery, "
    "let them know pickup is the only option."
)


def find_restaurant_for_call(
    db: Session,
    agent_id: Optional[str],
    to_number: Optional[str],
) -> Optional[Restaurant]:
    """Resolve by agent id first, then by the dialed number."""
    if agent_id:
        restaurant = db.query(Restaurant).filter(Restaurant.retell_agent_id == agent_id).first()
        if restaurant:
            return restaurant
    if to_number:
        return db.query(Restaurant).filter(Restaurant.retell_phone_number == to_number).first()
    return None


def _local_now(tz_name: Optional[str]) -> datetime:
    try:
        tz = ZoneInfo(tz_name or "UTC")
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using UTC", tz_name)
        tz = ZoneInfo("UTC")
    return datetime.now(tz)


def is_open_at(business_hours: Optional[Dict[str, Any]], now: datetime) -> Tuple[bool, str]:
    """
    Check business hours at a local time.

    Returns:
        (is_open, closing_time); closing_time is "" when no hours apply
    """
    hours = (business_hours or {}).get(DAY_KEYS[now.weekday()])
    if not hours or not hours.get("open") or not hours.get("close"):
        return True, ""

    current = now.strftime("%H:%M")
    return hours["open"] <= current <= hours["close"], hours["close"]


def build_inbound_config(
    db: Session,
    restaurant: Restaurant,
    from_number: Optional[str],
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build the {dynamic_variables, metadata} response for an inbound call.

    Args:
        db: Database session (read only)
        restaurant: Restaurant the call is for
        from_number: Caller's phone number, if known
        now: Local time to evaluate hours at (default: now in restaurant's timezone)
    """
    if now is None:
        now = _local_now(restaurant.timezone)
    is_open, closing_time = is_open_at(restaurant.business_hours, now)

    dynamic_variables: Dict[str, str] = {}
    if not is_open:
        dynamic_variables["store_status"] = CLOSED_STATUS
    elif closing_time:
        dynamic_variables["store_status"] = OPEN_UNTIL_STATUS.format(close=closing_time)
    else:
        dynamic_variables["store_status"] = OPEN_STATUS

    customer = find_customer(db, restaurant.id, from_number) if from_number else None
    if customer and customer.name:
        dynamic_variables["returning_customer"] = RETURNING_CUSTOMER.format(name=customer.name)
        logger.info("Returning customer %s calling restaurant #%d", mask_phone(from_number), restaurant.id)

    if not restaurant.delivery_enabled:
        dynamic_variables["delivery_note"] = PICKUP_ONLY_NOTE

    return {
        "dynamic_variables": dynamic_variables,
        "metadata": {
            "restaurant_id": restaurant.id,
            "caller_phone": from_number,
            "is_open": is_open,
        },
    }
