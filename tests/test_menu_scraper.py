"""
Tests for fetching a menu page and reducing it to text.
"""
from unittest.mock import MagicMock, patch

import pytest
import requests

from order_bot.menu_import.scraper import MenuScrapeError, html_to_text, scrape_menu_from_url


MENU_HTML = """
<html>
<head><title>Thai Garden</title><script>var promo = "$99.99";</script></head>
<body>
  <nav>Home | Order Online $5.00 off</nav>
  <div class="site-header">Thai Garden Restaurant</div>
  <div class="menu-section">
    <h2>APPETIZERS</h2>
    <p>Spring Rolls $6.99</p>
    <p>Crispy and fresh</p>
    <h2>MAIN</h2>
    <p>Pad Thai $12.50</p>
    <p>Chicken Satay $8.00</p>
    <p>Massaman Curry $14.00</p>
  </div>
  <footer>Delivery Fee $3.99</footer>
</body>
</html>
"""


def fake_response(text="", status_code=200, reason="OK"):
    response = MagicMock()
    response.text = text
    response.status_code = status_code
    response.reason = reason
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(response=response)
    return response


class TestHtmlToText:

    def test_menu_region_without_chrome(self):
        text = html_to_text(MENU_HTML)
        lines = text.split("\n")
        assert lines[0] == "APPETIZERS"
        assert "Spring Rolls $6.99" in lines
        assert "Massaman Curry $14.00" in lines
        assert "$99.99" not in text
        assert "Order Online" not in text
        assert "Thai Garden Restaurant" not in text
        assert "Delivery Fee" not in text

    def test_short_region_falls_back_to_body(self):
        html = '<body><div class="menu">Short</div><p>Cheese Pizza $10.00</p></body>'
        assert html_to_text(html) == "Short\nCheese Pizza $10.00"

    def test_inline_tags_stay_on_one_line(self):
        html = "<body><p>Cheese <b>Pizza</b>   <span>$10.00</span></p></body>"
        assert html_to_text(html) == "Cheese Pizza $10.00"

    def test_truncated(self):
        html = "<body><p>" + "a" * 500 + "</p></body>"
        assert len(html_to_text(html, max_chars=100)) == 100

    def test_empty(self):
        assert html_to_text("") == ""

    def test_unclosed_tags_still_split_lines(self):
        html = '<body><div class="cookie-banner">We use cookies</div><p>Cheese Pizza $10.00<p>Pepperoni $12.00</body>'
        assert html_to_text(html) == "Cheese Pizza $10.00\nPepperoni $12.00"

    def test_nested_menu_regions_are_not_repeated(self):
        items = "".join(
            f'<div class="menu-item">{name} ${price:.2f}</div>'
            for name, price in [("Cheese Pizza", 10), ("Pepperoni Pizza", 12),
                                ("Garlic Knots", 5), ("Caesar Salad", 8.5), ("Cannoli", 6), ("Tiramisu", 7)]
        )
        html = f'<body><div class="menu-list">{items}</div></body>'
        lines = html_to_text(html).split("\n")
        assert lines.count("Cheese Pizza $10.00") == 1
        assert lines[-1] == "Tiramisu $7.00"


class TestScrapeMenuFromUrl:

    @patch("order_bot.menu_import.scraper.requests.get")
    def test_extracts_menu(self, mock_get):
        mock_get.return_value = fake_response(MENU_HTML)

        menu = scrape_menu_from_url("https://thaigarden.example.com/menu")

        assert [c.name for c in menu.categories] == ["Appetizers", "Main"]
        assert menu.item_count == 4
        _, kwargs = mock_get.call_args
        assert "User-Agent" in kwargs["headers"]
        assert kwargs["timeout"] > 0

    @patch("order_bot.menu_import.scraper.requests.get")
    def test_http_error(self, mock_get):
        mock_get.return_value = fake_response(status_code=404, reason="Not Found")

        with pytest.raises(MenuScrapeError, match="Failed to fetch https://x.example.com: 404 Not Found"):
            scrape_menu_from_url("https://x.example.com")

    @patch("order_bot.menu_import.scraper.requests.get")
    def test_network_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("name resolution failed")

        with pytest.raises(MenuScrapeError, match="Failed to fetch"):
            scrape_menu_from_url("https://x.example.com")

    @patch("order_bot.menu_import.scraper.requests.get")
    def test_client_rendered_page(self, mock_get):
        mock_get.return_value = fake_response('<html><body><div id="root"></div></body></html>')

        with pytest.raises(MenuScrapeError, match="JavaScript rendering"):
            scrape_menu_from_url("https://spa.example.com")
