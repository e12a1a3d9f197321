"""
Routes Package for Order Bot
============================

API route definitions organized by domain. Each module defines a FastAPI
APIRouter with related endpoints grouped together.

Architecture Overview:
----------------------
**Voice Vendor Routes:**
- webhooks.py: Signed call lifecycle events (order reconciliation)
- tools.py: Live tool-call acknowledgements
- inbound.py: Per-call agent configuration

**Admin Routes (require authentication):**
- admin_menu.py: Website menu scrape and catalog import
- admin_orders.py: Order listing, detail and status changes
- admin_calls.py: Call log listing and detail

Router Registration:
--------------------
All routers are registered in app_factory.create_app() under two prefixes:
1. /api/v1/* - Versioned API (recommended)
2. /* - Root paths, where the voice vendor is configured to call

Error Handling:
---------------
Routes raise HTTPException for error conditions:
- 400: Bad request (invalid JSON, scrape failure)
- 401: Unauthorized (bad signature or credentials)
- 404: Not found (invalid ID)
- 429: Too many requests (rate limited)
- 503: Service unavailable (missing configuration)
"""

from .webhooks import webhooks_router
from .tools import tools_router
from .inbound import inbound_router
from .admin_menu import admin_menu_router
from .admin_orders import admin_orders_router
from .admin_calls import admin_calls_router

__all__ = [
    "webhooks_router",
    "tools_router",
    "inbound_router",
    "admin_menu_router",
    "admin_orders_router",
    "admin_calls_router",
]
