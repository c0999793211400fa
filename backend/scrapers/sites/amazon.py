"""
Amazon.es scraper.

Submitting the search box triggers a full page load, so the submit step
waits for navigation before the results container is checked.

Site structure:
- Results container: `.s-main-slot`
- Product cards: `.s-main-slot .s-result-item` (also matches banners and
  separators, which have no price and are filtered out)
- Card fields: `h2 span`, `.a-price-whole`, `.s-image`
"""

from typing import List
from bs4 import BeautifulSoup

from ..base import SiteExtractor, RawListing, NO_TITLE, NO_PRICE, NO_IMAGE
from ..config import get_site_config
from ..utils.extractors import extract_text, extract_attribute, select_items
from ..utils.normalizers import normalize_image_url


class AmazonExtractor(SiteExtractor):
    """Extractor for Amazon.es search results."""

    site_key = 'amazon'

    def __init__(self, config=None):
        super().__init__(config or get_site_config(self.site_key))

    def parse_results(self, soup: BeautifulSoup) -> List[RawListing]:
        items = []
        for card in select_items(soup, self.config.item_selector):
            image = extract_attribute(card, self.config.image_selector, ('src',), NO_IMAGE)
            if image != NO_IMAGE:
                image = normalize_image_url(image, self.config.home_url)

            items.append(RawListing(
                title=extract_text(card, self.config.title_selector, NO_TITLE),
                raw_price=extract_text(card, self.config.price_selector, NO_PRICE),
                image_url=image,
            ))

        self.logger.debug(f"Parsed {len(items)} result items")
        return items
