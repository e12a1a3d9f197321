"""
Tests for importing an extracted menu into the catalog.
"""
from unittest.mock import patch

import pytest

from order_bot.menu_import import MenuScrapeError
from order_bot.models import MenuCategory, MenuItem, ModifierGroup, ModifierOption
from order_bot.schemas.menu import ExtractedMenu
from order_bot.services.menu_import import import_extracted_menu
from order_bot.tasks.menu_lookup import load_catalog, match_menu_item


MENU = {
    "categories": [
        {
            "name": "Subs",
            "items": [
                {
                    "name": "Meatball Sub",
                    "description": "House meatballs and provolone",
                    "price": 11.0,
                    "modifiers": [
                        {
                            "group_name": "Bread",
                            "required": True,
                            "options": [
                                {"name": "White"},
                                {"name": "Whole Wheat", "price_adjustment": 0.5},
                            ],
                        }
                    ],
                },
                {"name": "Italian Sub", "price": 12.0},
            ],
        },
        {"name": "Desserts", "items": [{"name": "Cannoli", "price": 4.5}]},
    ]
}


class TestImportExtractedMenu:

    def test_creates_catalog_rows(self, db_session, restaurant):
        result = import_extracted_menu(db_session, restaurant, ExtractedMenu.model_validate(MENU))

        assert result.restaurant_id == restaurant.id
        assert (result.categories, result.items, result.modifier_groups, result.modifier_options) == (2, 3, 1, 2)

        categories = db_session.query(MenuCategory).order_by(MenuCategory.sort_order).all()
        assert [c.name for c in categories] == ["Subs", "Desserts"]

        sub = db_session.query(MenuItem).filter(MenuItem.name == "Meatball Sub").one()
        assert sub.category_id == categories[0].id
        assert sub.description == "House meatballs and provolone"
        assert sub.base_price == 11.0

        italian = db_session.query(MenuItem).filter(MenuItem.name == "Italian Sub").one()
        assert italian.description is None
        assert italian.sort_order == 1

        group = db_session.query(ModifierGroup).one()
        assert group.menu_item_id == sub.id
        assert group.required is True
        assert group.min_selections == 1
        options = db_session.query(ModifierOption).order_by(ModifierOption.sort_order).all()
        assert [(o.name, o.price_adjustment) for o in options] == [("White", 0.0), ("Whole Wheat", 0.5)]

    def test_imported_items_are_matchable(self, db_session, restaurant):
        import_extracted_menu(db_session, restaurant, ExtractedMenu.model_validate(MENU))
        catalog = load_catalog(db_session, restaurant.id)
        assert match_menu_item("a meatball sub", catalog).name == "Meatball Sub"

    def test_categories_appended_after_existing(self, db_session, restaurant):
        import_extracted_menu(db_session, restaurant, ExtractedMenu.model_validate(MENU))
        import_extracted_menu(db_session, restaurant, ExtractedMenu.model_validate(
            {"categories": [{"name": "Drinks", "items": [{"name": "Espresso", "price": 3.0}]}]}
        ))
        drinks = db_session.query(MenuCategory).filter(MenuCategory.name == "Drinks").one()
        assert drinks.sort_order == 2

    def test_failure_rolls_back_everything(self, db_session, restaurant):
        before = db_session.query(MenuItem).count()
        with patch("order_bot.services.menu_import.ModifierOption", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError):
                import_extracted_menu(db_session, restaurant, ExtractedMenu.model_validate(MENU))

        assert db_session.query(MenuCategory).count() == 0
        assert db_session.query(MenuItem).count() == before
        assert db_session.query(ModifierGroup).count() == 0


class TestImportEndpoint:

    def test_import(self, client, admin_auth, restaurant, db_session):
        resp = client.post(f"/admin/restaurants/{restaurant.id}/menu/import", json=MENU, auth=admin_auth)
        assert resp.status_code == 200
        assert resp.json()["items"] == 3
        assert db_session.query(MenuCategory).count() == 2

    def test_requires_auth(self, client, restaurant):
        resp = client.post(f"/admin/restaurants/{restaurant.id}/menu/import", json=MENU)
        assert resp.status_code == 401

    def test_wrong_password(self, client, restaurant):
        resp = client.post(
            f"/admin/restaurants/{restaurant.id}/menu/import", json=MENU, auth=("testadmin", "nope")
        )
        assert resp.status_code == 401

    def test_unknown_restaurant(self, client, admin_auth):
        resp = client.post("/admin/restaurants/999/menu/import", json=MENU, auth=admin_auth)
        assert resp.status_code == 404

    def test_empty_menu(self, client, admin_auth, restaurant):
        resp = client.post(
            f"/admin/restaurants/{restaurant.id}/menu/import", json={"categories": []}, auth=admin_auth
        )
        assert resp.status_code == 400

    def test_negative_price_rejected(self, client, admin_auth, restaurant):
        bad = {"categories": [{"name": "Subs", "items": [{"name": "Sub", "price": -1}]}]}
        resp = client.post(f"/admin/restaurants/{restaurant.id}/menu/import", json=bad, auth=admin_auth)
        assert resp.status_code == 422


class TestScrapeEndpoint:

    def test_returns_extracted_menu(self, client, admin_auth):
        menu = ExtractedMenu.model_validate(MENU)
        with patch("order_bot.routes.admin_menu.scrape_menu_from_url", return_value=menu) as mock_scrape:
            resp = client.post("/admin/menu/scrape", json={"url": "https://subs.example.com"}, auth=admin_auth)

        assert resp.status_code == 200
        assert resp.json()["menu"]["categories"][0]["name"] == "Subs"
        mock_scrape.assert_called_once_with("https://subs.example.com")

    def test_scrape_failure_is_400_with_reason(self, client, admin_auth):
        error = MenuScrapeError("Failed to fetch https://subs.example.com: 404 Not Found")
        with patch("order_bot.routes.admin_menu.scrape_menu_from_url", side_effect=error):
            resp = client.post("/admin/menu/scrape", json={"url": "https://subs.example.com"}, auth=admin_auth)

        assert resp.status_code == 400
        assert resp.json()["detail"] == "Failed to fetch https://subs.example.com: 404 Not Found"

    def test_invalid_url(self, client, admin_auth):
        resp = client.post("/admin/menu/scrape", json={"url": "subs.example.com"}, auth=admin_auth)
        assert resp.status_code == 422

    def test_requires_auth(self, client):
        resp = client.post("/admin/menu/scrape", json={"url": "https://subs.example.com"})
        assert resp.status_code == 401
