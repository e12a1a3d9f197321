"""
Menu import from restaurant websites.

    scraper.scrape_menu_from_url(url)     fetch a page and extract its menu
    scraper.html_to_text(html)            visible menu text of a page
    extractor.extract_menu_from_text(s)   heuristic text -> ExtractedMenu
"""

from .extractor import MenuExtractionError, extract_menu_from_text
from .scraper import MenuScrapeError, fetch_page_text, html_to_text, scrape_menu_from_url

__all__ = [
    "MenuExtractionError",
    "MenuScrapeError",
    "extract_menu_from_text",
    "fetch_page_text",
    "html_to_text",
    "scrape_menu_from_url",
]
