"""
Logging configuration for the order bot service.

Every module logs through ``logging.getLogger(__name__)`` under the
``order_bot`` namespace. LOG_LEVEL sets the namespace level. LOG_LEVELS
overrides single areas, which is how a noisy webhook stream or a menu
scrape is debugged without turning everything up:

    LOG_LEVELS="webhooks=DEBUG,scraper=DEBUG,sqlalchemy.engine=INFO"

Short names come from SERVICE_LOGGERS; anything else is taken as a full
logger name.

Usage:
    from order_bot.logging_config import setup_logging
    setup_logging()  # Call once at application startup

Environment variables:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, or CRITICAL (default: INFO)
    LOG_LEVELS: Comma-separated name=LEVEL overrides (default: none)
"""
import logging
import os
import sys
from typing import Dict, Optional

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

SERVICE_LOGGERS = {
    "webhooks": "order_bot.routes.webhooks",
    "calls": "order_bot.services.calls",
    "orders": "order_bot.services.order",
    "reconcile": "order_bot.tasks",
    "tools": "order_bot.routes.tools",
    "inbound": "order_bot.services.inbound",
    "auth": "order_bot.auth",
    "menu_import": "order_bot.menu_import",
    "scraper": "order_bot.menu_import.scraper",
}

# Quieted unless the service runs at DEBUG
LIBRARY_LOGGERS = ("urllib3", "sqlalchemy.engine", "alembic", "httpx", "retell")


def _level(name: Optional[str]) -> Optional[int]:
    name = (name or "").strip().upper()
    return getattr(logging, name) if name in VALID_LEVELS else None


def parse_logger_levels(spec: Optional[str]) -> Dict[str, int]:
    """
    Parse a LOG_LEVELS value into {logger name: numeric level}.

    Entries without ``=`` or with an unknown level are ignored.
    """
    levels: Dict[str, int] = {}
    for entry in (spec or "").split(","):
        name, sep, level_name = entry.partition("=")
        name = name.strip()
        level = _level(level_name)
        if not sep or not name or level is None:
            continue
        levels[SERVICE_LOGGERS.get(name, name)] = level
    return levels


def setup_logging(level: str = None, overrides: str = None) -> None:
    """
    Configure logging for the application.

    Args:
        level: Level for the order_bot namespace. If not provided, reads
               LOG_LEVEL; unknown values fall back to INFO.
        overrides: Per-logger levels in LOG_LEVELS format. If not provided,
                   reads LOG_LEVELS.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    level = level.strip().upper()
    if level not in VALID_LEVELS:
        level = "INFO"
    numeric_level = getattr(logging, level)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )

    logging.getLogger("order_bot").setLevel(numeric_level)

    if level != "DEBUG":
        for name in LIBRARY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    if overrides is None:
        overrides = os.getenv("LOG_LEVELS", "")
    per_logger = parse_logger_levels(overrides)
    for name, logger_level in per_logger.items():
        logging.getLogger(name).setLevel(logger_level)

    logger = logging.getLogger(__name__)
    logger.debug("Logging configured at %s level (%d overrides)", level, len(per_logger))


def mask_phone(phone: str | None) -> str:
    """Return only the last four digits of a phone number for log lines."""
    if not phone:
        return "unknown"
    return f"...{phone[-4:]}" if len(phone) >= 4 else phone
