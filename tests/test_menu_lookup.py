"""
Tests for matching spoken item names against the catalog.
"""
from order_bot.models import MenuItem
from order_bot.tasks.menu_lookup import load_catalog, match_menu_item, word_overlap_score
from order_bot.tasks.models import CatalogItem


CATALOG = [
    CatalogItem(id=1, name="Cheese Pizza", base_price=10.0),
    CatalogItem(id=2, name="Pepperoni Pizza", base_price=12.0),
    CatalogItem(id=3, name="Garlic Knots", base_price=5.0),
    CatalogItem(id=4, name="Chicken Caesar Salad Wrap", base_price=9.0),
]


class TestWordOverlapScore:

    def test_shared_words_over_longer_name(self):
        assert word_overlap_score("spicy chicken wrap", "Chicken Caesar Salad Wrap") == 0.5

    def test_no_overlap(self):
        assert word_overlap_score("tiramisu", "Cheese Pizza") == 0.0


class TestMatchMenuItem:

    def test_exact_match_is_case_insensitive(self):
        assert match_menu_item("cheese PIZZA", CATALOG).id == 1

    def test_exact_beats_overlap(self):
        catalog = [
            CatalogItem(id=10, name="Pizza Cheese Special", base_price=15.0),
            CatalogItem(id=11, name="Cheese Pizza", base_price=10.0),
        ]
        assert match_menu_item("Cheese Pizza", catalog).id == 11

    def test_spoken_name_containing_catalog_name(self):
        assert match_menu_item("large pepperoni pizza", CATALOG).id == 2

    def test_catalog_name_containing_spoken_name(self):
        assert match_menu_item("knots", CATALOG).id == 3

    def test_containment_takes_first_in_catalog_order(self):
        # "pizza" is contained in both pizzas; the first listed wins
        assert match_menu_item("pizza", CATALOG).id == 1

    def test_word_overlap_above_threshold(self):
        assert match_menu_item("spicy chicken wrap", CATALOG).id == 4

    def test_overlap_at_threshold_is_rejected(self):
        catalog = [CatalogItem(id=1, name="Alpha Beta Gamma Delta Epsilon Zeta Eta Theta Iota Kappa", base_price=1.0)]
        # 3 shared words out of 10 -> exactly 0.3
        assert match_menu_item("alpha beta gamma", catalog) is not None  # containment tier
        assert match_menu_item("gamma alpha beta", catalog) is None

    def test_no_lexical_overlap_returns_none(self):
        assert match_menu_item("tiramisu", CATALOG) is None

    def test_empty_name_returns_none(self):
        assert match_menu_item("   ", CATALOG) is None

    def test_explicit_threshold(self):
        assert match_menu_item("spicy chicken wrap", CATALOG, threshold=0.6) is None


class TestLoadCatalog:

    def test_only_this_restaurants_items_in_insert_order(self, db_session, restaurant):
        other = MenuItem(restaurant_id=restaurant.id + 100, name="Elsewhere Pie", base_price=1.0)
        db_session.add(other)
        db_session.commit()

        catalog = load_catalog(db_session, restaurant.id)
        names = [c.name for c in catalog]
        assert names == ["Cheese Pizza", "Pepperoni Pizza", "Garlic Knots", "Caesar Salad", "Soda"]
        assert catalog[0].base_price == 10.0
