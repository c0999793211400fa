"""
Tests for the per-site result parsers against saved result pages.
"""

from bs4 import BeautifulSoup

from scrapers.base import NO_TITLE, NO_PRICE, NO_IMAGE
from scrapers.pipeline import filter_listings
from scrapers.sites.aliexpress import AliExpressExtractor
from scrapers.sites.amazon import AmazonExtractor

from tests.fakes import load_fixture


def parse(extractor, fixture_name):
    soup = BeautifulSoup(load_fixture(fixture_name), "html.parser")
    return extractor.parse_results(soup)


class TestAliExpressParser:
    """Test AliExpressExtractor.parse_results()."""

    def test_reads_every_card_in_dom_order(self):
        items = parse(AliExpressExtractor(), "aliexpress_results.html")

        assert len(items) == 4
        assert items[0].title == "Auriculares Bluetooth TWS"
        assert items[0].raw_price == "12,34€"

    def test_protocol_relative_image_made_absolute(self):
        items = parse(AliExpressExtractor(), "aliexpress_results.html")

        assert items[0].image_url == "https://ae01.alicdn.com/kf/S1a2b3c.jpg_220x220.jpg"

    def test_missing_fields_use_placeholders(self):
        items = parse(AliExpressExtractor(), "aliexpress_results.html")

        assert items[1].raw_price == NO_PRICE
        assert items[3].image_url == NO_IMAGE

    def test_complete_cards_survive_filtering(self):
        listings = filter_listings(parse(AliExpressExtractor(), "aliexpress_results.html"))

        assert [l.title for l in listings] == [
            "Auriculares Bluetooth TWS",
            "Funda de silicona para auriculares",
        ]

    def test_empty_page(self):
        soup = BeautifulSoup("<html><body></body></html>", "html.parser")
        assert AliExpressExtractor().parse_results(soup) == []


class TestAmazonParser:
    """Test AmazonExtractor.parse_results()."""

    def test_banner_items_have_placeholders(self):
        items = parse(AmazonExtractor(), "amazon_results.html")

        assert len(items) == 4
        assert items[0].title == NO_TITLE
        assert items[0].raw_price == NO_PRICE
        assert items[0].image_url == NO_IMAGE

    def test_price_whole_includes_decimal_mark(self):
        items = parse(AmazonExtractor(), "amazon_results.html")

        assert items[1].raw_price == "299,"
        assert items[2].raw_price == "1.299,"

    def test_complete_results_survive_filtering(self):
        listings = filter_listings(parse(AmazonExtractor(), "amazon_results.html"))

        assert [l.title for l in listings] == [
            "Sony WH-1000XM5 Auriculares Inalámbricos",
            "Apple AirPods Pro (2.ª generación)",
        ]
        assert listings[0].image_url == "https://m.media-amazon.com/images/I/61a.jpg"


class TestExtractorConfig:
    """Test the site-specific search strategy settings."""

    def test_search_urls(self):
        assert AliExpressExtractor().search_url() == "https://www.aliexpress.com/"
        assert AmazonExtractor().search_url() == "https://www.amazon.es/"

    def test_amazon_waits_longer_and_for_navigation(self):
        config = AmazonExtractor().config

        assert config.search_timeout == 60.0
        assert config.submit_waits_for_navigation is True

    def test_aliexpress_settles_before_search(self):
        config = AliExpressExtractor().config

        assert config.settle_seconds == 5.0
        assert config.submit_waits_for_navigation is False
