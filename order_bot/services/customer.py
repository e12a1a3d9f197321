"""
Customer records.

Customers are scoped to a restaurant and identified by phone number. Phones
are normalized to E.164 with Google's phonenumbers library so that
"(555) 123-4567", "555-123-4567" and "+1 555 123 4567" are the same customer.
"""

import logging
from typing import Optional

import phonenumbers
from phonenumbers.phonenumberutil import NumberParseException
from sqlalchemy.orm import Session

from ..logging_config import mask_phone
from ..models import Customer

logger = logging.getLogger(__name__)

DEFAULT_REGION = "US"


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a phone number for storage and lookup.

    Numbers that parse to a possible number are returned in E.164 format;
    anything else is returned trimmed, as given. Blank input returns None.
    """
    if phone is None:
        return None
    raw = phone.strip()
    if not raw:
        return None

    try:
        parsed = phonenumbers.parse(raw, DEFAULT_REGION)
    except NumberParseException:
        logger.debug("Keeping unparseable phone as given: %s", mask_phone(raw))
        return raw

    if not phonenumbers.is_possible_number(parsed):
        return raw
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


def find_customer(db: Session, restaurant_id: int, phone: Optional[str]) -> Optional[Customer]:
    normalized = normalize_phone(phone)
    if not normalized:
        return None
    return (
        db.query(Customer)
        .filter(Customer.restaurant_id == restaurant_id, Customer.phone == normalized)
        .first()
    )


def upsert_customer(
    db: Session,
    restaurant_id: int,
    phone: Optional[str],
    name: Optional[str] = None,
) -> Optional[Customer]:
    """
    Get or create the customer for (restaurant_id, phone).

    An existing customer's name is replaced only when a new non-empty name is
    given. Changes are flushed, not committed; the caller owns the
    transaction.

    Returns:
        The Customer, or None if no phone number is available
    """
    normalized = normalize_phone(phone)
    if not normalized:
        return None

    name = name.strip() if name and name.strip() else None

    customer = (
        db.query(Customer)
        .filter(Customer.restaurant_id == restaurant_id, Customer.phone == normalized)
        .first()
    )

    if customer:
        if name:
            customer.name = name
    else:
        customer = Customer(restaurant_id=restaurant_id, phone=normalized, name=name)
        db.add(customer)

    db.flush()
    logger.debug("Customer #%d upserted for %s", customer.id, mask_phone(normalized))
    return customer
