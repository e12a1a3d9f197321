"""
Configuration Module for Order Bot
==================================

This module centralizes the configuration settings, environment variables and
constants used by the call-to-order service. Values are read from the
environment once at import time; `.env` files are loaded by `order_bot.main`
before this module is imported.

Configuration Categories:
-------------------------
- **Database**: Connection URL for the relational store.

- **Voice Vendor (Retell)**: API key used to verify webhook signatures and the
  allowed clock skew on signed timestamps.

- **Catalog Matching**: Threshold for the word-overlap tier of the menu
  matcher.

- **Menu Scraping**: Outbound HTTP settings and text limits for the website
  menu import.

- **Rate Limiting / CORS / Admin**: Same knobs as the other HTTP services.

Environment Variables:
----------------------
- DATABASE_URL: SQLAlchemy URL (default: "sqlite:///./order_bot.db")
- RETELL_API_KEY: Key the vendor signs webhooks with (required for webhooks)
- MATCH_SCORE_THRESHOLD: Word-overlap acceptance threshold (default: 0.3)
- SCRAPE_TIMEOUT_SECONDS: Menu page fetch timeout (default: 15)
- SCRAPE_MAX_CHARS / SCRAPE_MIN_CHARS: Page text limits (default: 15000 / 50)
- RATE_LIMIT_SCRAPE: Scrape endpoint rate limit (default: "10 per minute")
- RATE_LIMIT_ENABLED: Enable/disable rate limiting (default: "true")
- CORS_ORIGINS: Comma-separated allowed origins (default: "*")
- ADMIN_USERNAME / ADMIN_PASSWORD: Staff API credentials

Usage:
------
    from order_bot import config

    if not config.RETELL_API_KEY:
        ...
"""

import os
from typing import List


# =============================================================================
# Database Configuration
# =============================================================================

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./order_bot.db")


# =============================================================================
# Voice Vendor (Retell) Configuration
# =============================================================================
# Webhooks are signed with the account API key; the vendor SDK rejects
# signatures whose timestamp is more than five minutes old.

RETELL_API_KEY: str = os.getenv("RETELL_API_KEY", "")


# =============================================================================
# Catalog Matching Configuration
# =============================================================================
# The word-overlap tier only accepts a candidate whose score is strictly
# greater than this value.

MATCH_SCORE_THRESHOLD: float = float(os.getenv("MATCH_SCORE_THRESHOLD", "0.3"))


# =============================================================================
# Menu Scraping Configuration
# =============================================================================

SCRAPE_TIMEOUT_SECONDS: int = int(os.getenv("SCRAPE_TIMEOUT_SECONDS", "15"))
SCRAPE_USER_AGENT: str = os.getenv(
    "SCRAPE_USER_AGENT",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)

# Page text is truncated to this many characters before extraction
SCRAPE_MAX_CHARS: int = int(os.getenv("SCRAPE_MAX_CHARS", "15000"))

# Pages yielding less text than this are treated as unreadable
# (usually JavaScript-rendered menus)
SCRAPE_MIN_CHARS: int = int(os.getenv("SCRAPE_MIN_CHARS", "50"))


# =============================================================================
# Rate Limiting Configuration
# =============================================================================
# Uses slowapi with in-memory storage (use Redis for multi-worker prod).

RATE_LIMIT_SCRAPE: str = os.getenv("RATE_LIMIT_SCRAPE", "10 per minute")
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"


def get_rate_limit_scrape() -> str:
    """
    Return the current scrape rate limit.

    A function rather than the constant so tests can override it.
    """
    return RATE_LIMIT_SCRAPE


# =============================================================================
# CORS Configuration
# =============================================================================

_cors_origins_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in _cors_origins_env.split(",")
    if origin.strip()
] or ["*"]


# =============================================================================
# Admin Authentication Configuration
# =============================================================================
# Credentials for HTTP Basic Auth on staff endpoints (orders, menu import).
# ADMIN_PASSWORD must be set for those endpoints to respond.

ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")
