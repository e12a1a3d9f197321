"""
Admin Menu Routes for Order Bot
===============================

Staff endpoints for building a restaurant's catalog from its website.

Endpoints:
----------
- POST /admin/menu/scrape: Fetch a menu page and return the extracted menu
- POST /admin/restaurants/{id}/menu/import: Save an extracted menu to the catalog

Authentication:
---------------
All endpoints require admin authentication via HTTP Basic Auth.

Workflow:
---------
Scraping does not write anything. Staff review (and can edit) the returned
menu, then post it to the import endpoint, which appends the categories and
items to the catalog the call matcher searches.

Errors:
-------
- 400: Page could not be fetched, had too little text, or had no priced items
- 404: Unknown restaurant
- 429: Scrape rate limit exceeded
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ..auth import verify_admin_credentials
from ..config import get_rate_limit_scrape
from ..db import get_db
from ..menu_import import MenuExtractionError, MenuScrapeError, scrape_menu_from_url
from ..models import Restaurant
from ..rate_limit import limiter
from ..schemas.menu import ExtractedMenu, MenuImportResult, ScrapeRequest, ScrapeResponse
from ..services.menu_import import import_extracted_menu


logger = logging.getLogger(__name__)

admin_menu_router = APIRouter(prefix="/admin", tags=["Admin - Menu"])


@admin_menu_router.post("/menu/scrape", response_model=ScrapeResponse)
@limiter.limit(get_rate_limit_scrape)
def scrape_menu(
    request: Request,
    body: ScrapeRequest,
    _admin: str = Depends(verify_admin_credentials),
) -> ScrapeResponse:
    """
    Scrape a restaurant website into categories and priced items.

    The failure message is returned as the 400 detail so staff can see why
    a page could not be read.
    """
    try:
        menu = scrape_menu_from_url(body.url)
    except (MenuScrapeError, MenuExtractionError) as e:
        logger.warning("Menu scrape failed for %s: %s", body.url, e)
        raise HTTPException(status_code=400, detail=str(e))

    return ScrapeResponse(menu=menu)


@admin_menu_router.post("/restaurants/{restaurant_id}/menu/import", response_model=MenuImportResult)
def import_menu(
    restaurant_id: int,
    menu: ExtractedMenu,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> MenuImportResult:
    restaurant = db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
    if not restaurant:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    if not menu.categories:
        raise HTTPException(status_code=400, detail="Menu has no categories")

    return import_extracted_menu(db, restaurant, menu)
