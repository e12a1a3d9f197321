"""
Authentication Module for Order Bot
===================================

This module handles authentication for protected endpoints. Two mechanisms
are used:

1. **HTTP Basic Auth (Admin)**: Used for the staff endpoints (/admin/*).
   Credentials are configured via ADMIN_USERNAME / ADMIN_PASSWORD.

2. **Webhook Signatures (Voice Vendor)**: Every call lifecycle webhook carries
   an `x-retell-signature` header of the form ``v=<unix ms>,d=<hex digest>``.
   It is checked with the vendor SDK (`retell.Retell.verify`), which keys
   HMAC-SHA256 with the account API key over the raw body plus timestamp and
   rejects timestamps more than five minutes from now. Nothing in a webhook
   payload is trusted before this check passes.

Security Features:
------------------
- Constant-time comparison (`secrets.compare_digest`) for admin credentials.
- Stale signatures are rejected by the SDK, so a captured delivery cannot be
  replayed later.
- Fail closed: if ADMIN_PASSWORD or RETELL_API_KEY is not configured the
  corresponding endpoints return 503 rather than accepting unauthenticated
  requests.

Usage:
------
    from order_bot.auth import verify_admin_credentials, verify_retell_signature

    @router.get("/admin/orders")
    def list_orders(_admin: str = Depends(verify_admin_credentials)):
        ...

    raw_body = await request.body()
    verify_retell_signature(raw_body, request.headers.get("x-retell-signature"))
"""

import logging
import secrets
from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from retell import Retell

from . import config

logger = logging.getLogger(__name__)


# =============================================================================
# HTTP Basic Auth Setup
# =============================================================================

security = HTTPBasic(realm="OrderBot Admin")


def verify_admin_credentials(
    credentials: HTTPBasicCredentials = Depends(security),
) -> str:
    """
    Verify HTTP Basic Auth credentials for admin endpoints.

    Returns:
        str: The authenticated username if credentials are valid.

    Raises:
        HTTPException (503): If ADMIN_PASSWORD is not set.
        HTTPException (401): If credentials are invalid.
    """
    if not config.ADMIN_PASSWORD:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin authentication not configured. Set ADMIN_PASSWORD environment variable.",
        )

    username_correct = secrets.compare_digest(
        credentials.username.encode("utf-8"),
        config.ADMIN_USERNAME.encode("utf-8"),
    )
    password_correct = secrets.compare_digest(
        credentials.password.encode("utf-8"),
        config.ADMIN_PASSWORD.encode("utf-8"),
    )

    if not (username_correct and password_correct):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


# =============================================================================
# Voice Vendor Webhook Signatures
# =============================================================================

@lru_cache(maxsize=4)
def _retell_client(api_key: str) -> Retell:
    return Retell(api_key=api_key)


def is_valid_retell_signature(raw_body: bytes, api_key: str, signature: Optional[str]) -> bool:
    """
    Check a `x-retell-signature` header against the raw body.

    Args:
        raw_body: Request body exactly as received
        api_key: Shared key the vendor signs with
        signature: Header value, ``v=<unix ms>,d=<hex digest>``

    Returns:
        True only if the header is well formed, fresh and the digest matches.
    """
    if not signature or not api_key:
        return False

    try:
        body = raw_body.decode("utf-8")
    except UnicodeDecodeError:
        return False

    return bool(_retell_client(api_key).verify(body, api_key=api_key, signature=signature.strip()))


def verify_retell_signature(raw_body: bytes, signature: Optional[str]) -> None:
    """
    Reject a webhook delivery unless its signature verifies.

    Raises:
        HTTPException (503): If RETELL_API_KEY is not configured.
        HTTPException (401): If the signature is missing, stale or wrong.
    """
    if not config.RETELL_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Webhook verification not configured. Set RETELL_API_KEY environment variable.",
        )

    if not is_valid_retell_signature(raw_body, config.RETELL_API_KEY, signature):
        logger.warning("Rejected webhook with invalid signature")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid signature",
        )
