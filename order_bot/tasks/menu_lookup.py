"""
Menu lookup for spoken item names.

Resolves the free-text item name the voice agent recorded against the
restaurant's catalog. Tiers are tried in order and the first hit wins:

1. Exact match, case-insensitive.
2. Containment in either direction ("large cheese pizza" / "Cheese Pizza");
   the first catalog entry that qualifies is taken, in catalog order.
3. Word overlap: |shared words| / max(word counts); the best score wins,
   ties keep the earlier entry, and only scores above the threshold count.

No match returns None. Callers keep the item (unpriced) rather than drop it.
"""

import logging
from typing import Iterable, Optional, Sequence

from sqlalchemy.orm import Session

from .. import config
from ..models import MenuItem
from .models import CatalogItem

logger = logging.getLogger(__name__)


def _words(text: str) -> set[str]:
    return set(text.lower().split())


def word_overlap_score(spoken: str, candidate: str) -> float:
    """Share of words in common, relative to the longer of the two names."""
    spoken_words = _words(spoken)
    candidate_words = _words(candidate)
    if not spoken_words or not candidate_words:
        return 0.0
    shared = spoken_words & candidate_words
    return len(shared) / max(len(spoken_words), len(candidate_words))


def match_menu_item(
    name: str,
    catalog: Sequence[CatalogItem],
    threshold: Optional[float] = None,
) -> Optional[CatalogItem]:
    """
    Find the catalog item a spoken name refers to.

    Args:
        name: Item name as the agent recorded it
        catalog: Snapshot of the restaurant's menu items
        threshold: Minimum word-overlap score, exclusive (default from config)

    Returns:
        The matching CatalogItem, or None if no tier matches
    """
    lower = (name or "").strip().lower()
    if not lower:
        return None

    if threshold is None:
        threshold = config.MATCH_SCORE_THRESHOLD

    # Pass 1: exact
    for item in catalog:
        if item.name.strip().lower() == lower:
            return item

    # Pass 2: containment either way, first in catalog order
    for item in catalog:
        item_lower = item.name.strip().lower()
        if not item_lower:
            continue
        if lower in item_lower or item_lower in lower:
            return item

    # Pass 3: word overlap
    best_match: Optional[CatalogItem] = None
    best_score = 0.0
    for item in catalog:
        score = word_overlap_score(lower, item.name)
        if score > best_score and score > threshold:
            best_score = score
            best_match = item

    if best_match is None:
        logger.info("No catalog match for spoken item %r", name)
    else:
        logger.debug("Matched %r to %r by word overlap (%.2f)", name, best_match.name, best_score)
    return best_match


def catalog_from_items(items: Iterable[MenuItem]) -> list[CatalogItem]:
    return [CatalogItem(id=m.id, name=m.name, base_price=m.base_price or 0.0) for m in items]


def load_catalog(db: Session, restaurant_id: int) -> list[CatalogItem]:
    """
    Read the restaurant's current menu items into an immutable snapshot.

    Queried fresh for every reconciliation; there is no catalog cache.
    """
    items = (
        db.query(MenuItem)
        .filter(MenuItem.restaurant_id == restaurant_id)
        .order_by(MenuItem.id)
        .all()
    )
    return catalog_from_items(items)
