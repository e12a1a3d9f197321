"""
Catalog import from an extracted menu.

Writes an ExtractedMenu into menu_categories, menu_items, modifier_groups and
modifier_options for one restaurant. New categories are appended after the
restaurant's existing ones; items and options keep their extracted order.
The whole import is one transaction: either every row is written or none.
"""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models import MenuCategory, MenuItem, ModifierGroup, ModifierOption, Restaurant
from ..schemas.menu import ExtractedMenu, MenuImportResult


logger = logging.getLogger(__name__)


def import_extracted_menu(db: Session, restaurant: Restaurant, menu: ExtractedMenu) -> MenuImportResult:
    """
    Persist a scraped (or hand-edited) menu into the restaurant's catalog.

    Args:
        db: Database session (committed on success, rolled back on failure)
        restaurant: Target restaurant
        menu: Categories, items and optional modifier groups to create

    Returns:
        MenuImportResult with the number of rows created per table
    """
    counts = {"categories": 0, "items": 0, "modifier_groups": 0, "modifier_options": 0}

    try:
        existing = (
            db.query(func.count(MenuCategory.id))
            .filter(MenuCategory.restaurant_id == restaurant.id)
            .scalar()
        ) or 0

        for cat_index, cat in enumerate(menu.categories):
            category = MenuCategory(
                restaurant_id=restaurant.id,
                name=cat.name,
                sort_order=existing + cat_index,
            )
            db.add(category)
            db.flush()
            counts["categories"] += 1

            for item_index, item in enumerate(cat.items):
                menu_item = MenuItem(
                    restaurant_id=restaurant.id,
                    category_id=category.id,
                    name=item.name,
                    description=item.description or None,
                    base_price=item.price,
                    sort_order=item_index,
                )
                db.add(menu_item)
                db.flush()
                counts["items"] += 1

                for group_index, mod in enumerate(item.modifiers or []):
                    group = ModifierGroup(
                        menu_item_id=menu_item.id,
                        restaurant_id=restaurant.id,
                        name=mod.group_name,
                        required=mod.required,
                        min_selections=1 if mod.required else 0,
                        sort_order=group_index,
                    )
                    db.add(group)
                    db.flush()
                    counts["modifier_groups"] += 1

                    for opt_index, opt in enumerate(mod.options):
                        db.add(ModifierOption(
                            modifier_group_id=group.id,
                            name=opt.name,
                            price_adjustment=opt.price_adjustment,
                            sort_order=opt_index,
                        ))
                        counts["modifier_options"] += 1

        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Menu import failed for restaurant #%d, rolled back", restaurant.id)
        raise

    logger.info(
        "Imported menu for restaurant #%d: %d categories, %d items, %d modifier groups",
        restaurant.id, counts["categories"], counts["items"], counts["modifier_groups"],
    )
    return MenuImportResult(restaurant_id=restaurant.id, **counts)
