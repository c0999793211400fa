"""
Tests for scraper normalization and extraction utilities.
"""

import pytest
from bs4 import BeautifulSoup

from scrapers.utils import (
    clean_text,
    extract_attribute,
    extract_text,
    normalize_image_url,
    parse_price,
)


class TestParsePrice:
    """Test raw numeric price parsing."""

    @pytest.mark.parametrize("raw, expected", [
        ("19,99 €", 19.99),
        ("1.299,00€", 1299.0),
        ("US $12.34", 12.34),
        ("€1,234.50", 1234.5),
        ("19,", 19.0),
        ("1.299", 1299.0),
        ("3,5", 3.5),
        ("1 299,99 €", 1299.99),
    ])
    def test_parses_amount(self, raw, expected):
        assert parse_price(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", ["", "Sin precio", "Gratis", None])
    def test_no_amount(self, raw):
        assert parse_price(raw) is None


class TestCleanText:
    """Test whitespace normalization."""

    def test_collapses_whitespace(self):
        assert clean_text("  Funda   iPhone\n 15 ") == "Funda iPhone 15"

    def test_non_breaking_space(self):
        assert clean_text("19,99\xa0€") == "19,99 €"

    def test_empty(self):
        assert clean_text("") == ""


class TestNormalizeImageUrl:
    """Test image URL normalization."""

    def test_protocol_relative(self):
        assert normalize_image_url("//ae01.alicdn.com/kf/a.jpg", "https://www.aliexpress.com/") == \
            "https://ae01.alicdn.com/kf/a.jpg"

    def test_root_relative(self):
        assert normalize_image_url("/images/I/71.jpg", "https://www.amazon.es/") == \
            "https://www.amazon.es/images/I/71.jpg"

    def test_absolute_unchanged(self):
        url = "https://m.media-amazon.com/images/I/71.jpg"
        assert normalize_image_url(url, "https://www.amazon.es/") == url


class TestExtractors:
    """Test placeholder-aware DOM helpers."""

    HTML = """
    <div class="card">
        <span class="title">  Taza   de café </span>
        <span class="empty">   </span>
        <img class="lazy" src="" data-src="https://img.example/taza.jpg">
    </div>
    """

    def setup_method(self):
        self.card = BeautifulSoup(self.HTML, "html.parser").select_one(".card")

    def test_extract_text(self):
        assert extract_text(self.card, ".title", "Sin título") == "Taza de café"

    def test_extract_text_missing_or_blank(self):
        assert extract_text(self.card, ".price", "Sin precio") == "Sin precio"
        assert extract_text(self.card, ".empty", "Sin precio") == "Sin precio"

    def test_extract_attribute_falls_through_blank(self):
        assert extract_attribute(self.card, "img", ("src", "data-src"), "Sin imagen") == \
            "https://img.example/taza.jpg"

    def test_extract_attribute_missing(self):
        assert extract_attribute(self.card, "img", ("src",), "Sin imagen") == "Sin imagen"
        assert extract_attribute(self.card, "video", ("src",), "Sin imagen") == "Sin imagen"
