"""
Heuristic menu extraction from plain text.

Turns the visible text of a restaurant's menu page into categories of priced
items without any model or markup. The parser is line oriented and makes a
single forward pass:

1. Split the text into trimmed, non-empty lines. Runs of two or more
   whitespace characters also break a line.
2. A line is a category heading when it has no price, is 2 to 60 characters
   long, and either names a food category ("Appetizers", "Pasta"), is short
   all-caps text, or is followed by at least two priced lines within the
   next five.
3. A heading closes the current category and opens a new one.
4. Any other line with a price becomes an item. The name is the text before
   the price. For ranges ("$12 - $15") the low bound is used.
5. A following line without a price, 11 to 199 characters long, and not a
   heading, is taken as the item's description.
6. Items are de-duplicated per category by case-insensitive name and empty
   categories are dropped.

Results are best effort: the goal is to pick up the obviously priced items on
a typical menu page, not to parse arbitrary prose exactly.
"""

import logging
import re
from typing import List, Optional

from ..schemas.menu import ExtractedCategory, ExtractedItem, ExtractedMenu


logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Menu"

PRICE_PATTERN = re.compile(r"\$\s?(\d{1,4}(?:\.\d{1,2})?)")
PRICE_RANGE_PATTERN = re.compile(
    r"\$\s?(\d{1,4}(?:\.\d{1,2})?)\s*[-–—]\s*\$?\s?(\d{1,4}(?:\.\d{1,2})?)"
)

CATEGORY_KEYWORDS = re.compile(
    r"\b(appetizer|starter|entre|entree|main|salad|soup|sandwich|burger|pizza|pasta"
    r"|seafood|dessert|drink|beverage|side|breakfast|lunch|dinner|special|combo|kid"
    r"|plate|taco|sushi|roll|noodle|rice|curry|grill|fried|baked|wings|wrap|bowl"
    r"|platter|brunch|happy hour|shareables?|small plates?)\b",
    re.IGNORECASE,
)

# Priced lines that are charges, not dishes
NON_ITEM_TERMS = re.compile(
    r"\b(tax|tip|gratuity|total|subtotal|delivery|fee|service)\b",
    re.IGNORECASE,
)

HEADING_MIN_LEN = 2
HEADING_MAX_LEN = 60
CAPS_HEADING_MIN_LEN = 3
CAPS_HEADING_MAX_LEN = 40
LOOKAHEAD_LINES = 5
LOOKAHEAD_MIN_PRICED = 2
DESCRIPTION_MIN_LEN = 10  # exclusive
DESCRIPTION_MAX_LEN = 200  # exclusive
DESCRIPTION_KEEP_CHARS = 100
ITEM_NAME_MIN_LEN = 2


class MenuExtractionError(ValueError):
    """Raised when no menu items can be recovered from the text."""


def split_lines(text: str) -> List[str]:
    text = (text or "").replace("\r\n", "\n")
    text = re.sub(r"\s{2,}", "\n", text)
    return [line.strip() for line in text.split("\n") if line.strip()]


def title_case(text: str) -> str:
    """Lowercase, then capitalize the first letter of each word."""
    return re.sub(r"(?:^|\s)\w", lambda m: m.group(0).upper(), text.lower())


def clean_item_name(name: str) -> str:
    name = re.sub(r"^[\d.)\-•·*#]+\s*", "", name)
    name = re.sub(r"[.\-–—:,]+$", "", name)
    if name == name.upper() and len(name) > 3:
        name = title_case(name)
    return name.strip()


def has_price(line: str) -> bool:
    return PRICE_PATTERN.search(line) is not None


def looks_like_category(lines: List[str], idx: int) -> bool:
    """Decide whether lines[idx] is a category heading."""
    line = lines[idx]
    if has_price(line):
        return False
    if not HEADING_MIN_LEN <= len(line) <= HEADING_MAX_LEN:
        return False

    if CATEGORY_KEYWORDS.search(line):
        return True

    if line == line.upper() and CAPS_HEADING_MIN_LEN <= len(line) <= CAPS_HEADING_MAX_LEN:
        return True

    window = lines[idx + 1:idx + 1 + LOOKAHEAD_LINES]
    return sum(1 for nxt in window if has_price(nxt)) >= LOOKAHEAD_MIN_PRICED


def parse_price(line: str) -> Optional[float]:
    """Price on a line, using the low bound of a range. None if unpriced."""
    range_match = PRICE_RANGE_PATTERN.search(line)
    if range_match:
        return float(range_match.group(1))
    match = PRICE_PATTERN.search(line)
    if match:
        return float(match.group(1))
    return None


def item_name_before_price(line: str) -> str:
    match = PRICE_PATTERN.search(line)
    name = line[:match.start()].strip() if match else line.strip()
    return re.sub(r"[.\-–—:,•·]+$", "", name).strip()


def heading_name(line: str) -> str:
    return title_case(re.sub(r"[:\-–—]+$", "", line).strip())


def _dedupe(items: List[ExtractedItem]) -> List[ExtractedItem]:
    seen = set()
    unique = []
    for item in items:
        key = item.name.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def extract_menu_from_text(text: str) -> ExtractedMenu:
    """
    Parse menu page text into categories of priced items.

    Args:
        text: Visible page text, one logical line per menu line

    Returns:
        ExtractedMenu with at least one non-empty category

    Raises:
        MenuExtractionError: If no priced items are found
    """
    lines = split_lines(text)
    categories: List[ExtractedCategory] = []
    current = ExtractedCategory(name=DEFAULT_CATEGORY)

    i = 0
    while i < len(lines):
        line = lines[i]

        if looks_like_category(lines, i):
            if current.items:
                categories.append(current)
            current = ExtractedCategory(name=heading_name(line))
            i += 1
            continue

        price = parse_price(line)
        if price is None:
            i += 1
            continue

        name = item_name_before_price(line)
        if len(name) < ITEM_NAME_MIN_LEN or price <= 0 or NON_ITEM_TERMS.search(name):
            i += 1
            continue

        description = ""
        if i + 1 < len(lines):
            nxt = lines[i + 1]
            if (
                not has_price(nxt)
                and DESCRIPTION_MIN_LEN < len(nxt) < DESCRIPTION_MAX_LEN
                and not looks_like_category(lines, i + 1)
            ):
                description = nxt
                i += 1

        cleaned = clean_item_name(name)
        if not cleaned:
            i += 1
            continue

        current.items.append(ExtractedItem(
            name=cleaned,
            description=description[:DESCRIPTION_KEEP_CHARS],
            price=price,
        ))
        i += 1

    if current.items:
        categories.append(current)

    if not categories:
        raise MenuExtractionError("Could not identify any menu items from the website content.")

    for category in categories:
        category.items = _dedupe(category.items)

    menu = ExtractedMenu(categories=[c for c in categories if c.items])
    logger.info("Extracted %d items in %d categories", menu.item_count, len(menu.categories))
    return menu
