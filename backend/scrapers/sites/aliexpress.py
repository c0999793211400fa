"""
AliExpress scraper.

The home page is a client-side app: the search box only becomes usable a
few seconds after DOMContentLoaded, and submitting a search swaps the
gallery in place without a full navigation.

Site structure:
- Results container: `.list--galleryWrapper--29HRJT4`
- Product cards: `.multi--modalContext--1Hxqhwi`
- Card fields: `.multi--title--G7dOCj3`, `.multi--price--1okBCly`,
  `img.images--item--3XZa6xf`

The hashed class suffixes change whenever AliExpress redeploys its
frontend; update them in config.py when the scraper starts timing out.
"""

from typing import List
from bs4 import BeautifulSoup

from ..base import SiteExtractor, RawListing, NO_TITLE, NO_PRICE, NO_IMAGE
from ..config import get_site_config
from ..utils.extractors import extract_text, extract_attribute, select_items
from ..utils.normalizers import normalize_image_url


class AliExpressExtractor(SiteExtractor):
    """Extractor for AliExpress search results."""

    site_key = 'aliexpress'

    def __init__(self, config=None):
        super().__init__(config or get_site_config(self.site_key))

    def parse_results(self, soup: BeautifulSoup) -> List[RawListing]:
        items = []
        for card in select_items(soup, self.config.item_selector):
            image = extract_attribute(card, self.config.image_selector, ('src', 'data-src'), NO_IMAGE)
            if image != NO_IMAGE:
                image = normalize_image_url(image, self.config.home_url)

            items.append(RawListing(
                title=extract_text(card, self.config.title_selector, NO_TITLE),
                raw_price=extract_text(card, self.config.price_selector, NO_PRICE),
                image_url=image,
            ))

        self.logger.debug(f"Parsed {len(items)} product cards")
        return items
