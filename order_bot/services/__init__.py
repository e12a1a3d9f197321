"""
Services Package for Order Bot
==============================

Service modules that encapsulate business logic behind the HTTP routes.
Services receive their database session from the caller and own the
transaction boundary for the writes they perform.

Available Services:
-------------------
- **calls**: Call lifecycle handlers (call_started, call_ended, call_analyzed)
- **order**: Atomic order persistence for a finished call
- **customer**: Phone normalization and customer upsert
- **menu_import**: Catalog import from an extracted menu
- **tax_utils**: Money rounding and order totals

Usage:
------
Import services directly from their modules:

    from order_bot.services.calls import dispatch_webhook_event
    from order_bot.services.order import persist_call_order

Submodules are not imported here; the task modules depend on tax_utils and
the order service depends on the task modules.
"""
