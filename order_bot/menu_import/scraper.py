"""
Menu page scraping.

Fetches a restaurant's menu page and reduces it to the visible text the
extractor works on.

Page text:
----------
- script, style, nav, footer, header, iframe, noscript, svg and img
  elements are dropped, as are role="navigation" elements and elements whose
  class mentions nav, footer, header or cookie.
- The first menu-looking region with more than 100 characters of text is
  used: class/id containing "menu", then class containing "food", "dish" or
  "item", then <main>, <article>, .content, #content. Otherwise the whole
  <body> is used.
- Block elements become line breaks and runs of spaces collapse, so each menu
  line stays on its own line.
- The result is truncated to SCRAPE_MAX_CHARS.

Pages rendered client side usually yield almost no text; those fail with
MenuScrapeError rather than producing an empty menu.
"""

import logging
from typing import List, Optional

import requests
from bs4 import BeautifulSoup

from .. import config
from ..schemas.menu import ExtractedMenu
from .extractor import extract_menu_from_text


logger = logging.getLogger(__name__)

REMOVED_SELECTORS = (
    "script, style, nav, footer, header, iframe, noscript, svg, img",
    '[role="navigation"]',
    '[class*="nav"], [class*="footer"], [class*="header"], [class*="cookie"]',
)

MENU_SELECTORS = (
    '[class*="menu"]',
    '[id*="menu"]',
    '[class*="food"]',
    '[class*="dish"]',
    '[class*="item"]',
    "main",
    "article",
    ".content",
    "#content",
)

BLOCK_TAGS = [
    "address", "article", "aside", "blockquote", "br", "dd", "div", "dl", "dt",
    "fieldset", "figcaption", "figure", "form", "h1", "h2", "h3", "h4", "h5", "h6",
    "hr", "li", "main", "ol", "p", "pre", "section", "table", "tbody", "td", "tfoot",
    "th", "thead", "tr", "ul",
]

REGION_MIN_CHARS = 100


class MenuScrapeError(Exception):
    """Raised when a menu page cannot be fetched or has too little text."""


def _clean(raw: str) -> str:
    lines = (" ".join(line.split()) for line in raw.splitlines())
    return "\n".join(line for line in lines if line).strip()


def _strip_chrome(soup: BeautifulSoup) -> None:
    for selector in REMOVED_SELECTORS:
        for el in soup.select(selector):
            # Nested matches go away with their removed ancestor
            if not el.decomposed:
                el.decompose()


def _mark_blocks(soup: BeautifulSoup) -> None:
    for el in soup.find_all(BLOCK_TAGS):
        el.insert_before("\n")
        el.insert_after("\n")


def _outermost(matches: List) -> List:
    matched = {id(m) for m in matches}
    return [m for m in matches if not any(id(p) in matched for p in m.parents)]


def html_to_text(html: str, max_chars: Optional[int] = None) -> str:
    """
    Reduce a menu page's HTML to its visible menu text.

    Args:
        html: Page markup
        max_chars: Truncation limit (default SCRAPE_MAX_CHARS)

    Returns:
        Newline-separated text, possibly empty
    """
    if max_chars is None:
        max_chars = config.SCRAPE_MAX_CHARS

    soup = BeautifulSoup(html or "", "html.parser")
    _strip_chrome(soup)
    _mark_blocks(soup)

    text = ""
    for selector in MENU_SELECTORS:
        matches = _outermost(soup.select(selector))
        if not matches:
            continue
        region_text = "\n".join(t for t in (_clean(m.get_text()) for m in matches) if t)
        if len(region_text) > REGION_MIN_CHARS:
            text = region_text
            break

    if not text:
        text = _clean((soup.body or soup).get_text())

    return text[:max_chars]


def fetch_page_text(url: str) -> str:
    """
    Download a page and return its visible menu text.

    Raises:
        MenuScrapeError: On network errors or a non-2xx response
    """
    headers = {"User-Agent": config.SCRAPE_USER_AGENT}

    logger.debug("Fetching menu page: %s", url)
    try:
        response = requests.get(url, headers=headers, timeout=config.SCRAPE_TIMEOUT_SECONDS)
        response.raise_for_status()
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else "error"
        reason = e.response.reason if e.response is not None else ""
        raise MenuScrapeError(f"Failed to fetch {url}: {status} {reason}".strip()) from e
    except requests.RequestException as e:
        raise MenuScrapeError(f"Failed to fetch {url}: {e}") from e

    text = html_to_text(response.text)
    logger.info("Fetched %s: %d characters of text", url, len(text))
    return text


def scrape_menu_from_url(url: str) -> ExtractedMenu:
    """
    Fetch a menu page and extract its categories and items.

    Raises:
        MenuScrapeError: Page could not be fetched or had too little text
        MenuExtractionError: No priced items were found in the text
    """
    text = fetch_page_text(url)

    if len(text) < config.SCRAPE_MIN_CHARS:
        raise MenuScrapeError(
            "Could not extract enough text from the website. "
            "The page may require JavaScript rendering."
        )

    return extract_menu_from_text(text)
