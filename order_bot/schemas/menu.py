"""
Menu Import Schemas for Order Bot
=================================

Pydantic models for scraping a restaurant website into a structured menu and
importing that menu into the catalog.

Endpoint Coverage:
------------------
- POST /admin/menu/scrape: Fetch a URL and return the ExtractedMenu
- POST /admin/restaurants/{id}/menu/import: Persist an ExtractedMenu

Structure:
----------
    ExtractedMenu
      categories[]
        name
        items[]
          name, description, price
          modifiers[]            (optional)
            group_name, required
            options[]
              name, price_adjustment

The scraper never produces modifiers; the field exists so staff can edit a
scraped menu (or write one by hand) before importing it.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class ExtractedModifierOption(BaseModel):
    name: str = Field(..., min_length=1)
    price_adjustment: float = 0.0


class ExtractedModifierGroup(BaseModel):
    group_name: str = Field(..., min_length=1)
    required: bool = False
    options: List[ExtractedModifierOption] = Field(default_factory=list)


class ExtractedItem(BaseModel):
    """
    One priced line recovered from menu text.

    Attributes:
        name: Cleaned item name
        description: Following descriptive line, at most 100 characters ("" if none)
        price: Price in dollars; for a range, the low bound
        modifiers: Optional modifier groups
    """
    name: str = Field(..., min_length=1)
    description: str = ""
    price: float = Field(..., ge=0)
    modifiers: Optional[List[ExtractedModifierGroup]] = None


class ExtractedCategory(BaseModel):
    name: str = Field(..., min_length=1)
    items: List[ExtractedItem] = Field(default_factory=list)


class ExtractedMenu(BaseModel):
    categories: List[ExtractedCategory] = Field(default_factory=list)

    @property
    def item_count(self) -> int:
        return sum(len(c.items) for c in self.categories)


class ScrapeRequest(BaseModel):
    """Request body for POST /admin/menu/scrape."""
    url: str

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        v = v.strip()
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError("Please enter a valid URL")
        return v


class ScrapeResponse(BaseModel):
    menu: ExtractedMenu


class MenuImportResult(BaseModel):
    """
    Counts of rows created by a menu import.

    Example:
        {"restaurant_id": 1, "categories": 3, "items": 24, "modifier_groups": 0, "modifier_options": 0}
    """
    restaurant_id: int
    categories: int
    items: int
    modifier_groups: int
    modifier_options: int
