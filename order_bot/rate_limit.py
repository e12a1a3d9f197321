"""
Rate limiting for Order Bot.

One slowapi Limiter shared by every router and registered on the app in
create_app(). Uses in-memory storage by default; for production with multiple
workers, use Redis: Limiter(key_func=..., storage_uri="redis://...").
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import RATE_LIMIT_ENABLED

limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)
