"""
Site configurations for the e-commerce search targets.

Each site has a SiteConfig that defines:
- The home page holding the search box
- CSS selectors for the search box, results container and product cards
- Settle delay and wait timeouts observed for the site
"""

from .base import SiteConfig


# ============================================================
# SITE CONFIGURATIONS
# ============================================================

SITES = {
    # AliExpress renders the home page client-side; the search box is not
    # interactable until the app has booted, hence the fixed settle delay.
    'aliexpress': SiteConfig(
        name='AliExpress',
        short_name='ALIEXPRESS',
        home_url='https://www.aliexpress.com/',
        search_input_selector='input[type="text"]',
        results_selector='.list--galleryWrapper--29HRJT4',
        item_selector='.multi--modalContext--1Hxqhwi',
        title_selector='.multi--title--G7dOCj3',
        price_selector='.multi--price--1okBCly',
        image_selector='img.images--item--3XZa6xf',
        settle_seconds=5.0,
        search_timeout=30.0,
        results_timeout=30.0,
        submit_waits_for_navigation=False,
        enabled=True,
    ),

    # Amazon submits the search as a full page load.
    'amazon': SiteConfig(
        name='Amazon.es',
        short_name='AMAZON',
        home_url='https://www.amazon.es/',
        search_input_selector='input[name="field-keywords"]',
        results_selector='.s-main-slot',
        item_selector='.s-main-slot .s-result-item',
        title_selector='h2 span',
        price_selector='.a-price-whole',
        image_selector='.s-image',
        settle_seconds=5.0,
        search_timeout=60.0,
        results_timeout=60.0,
        submit_waits_for_navigation=True,
        enabled=True,
    ),
}


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def get_site_config(site_key: str) -> SiteConfig:
    """
    Get configuration for a site by its key.

    Args:
        site_key: Site identifier (e.g., 'amazon', 'aliexpress')

    Returns:
        SiteConfig for the site

    Raises:
        ValueError: If site_key is not found
    """
    if site_key not in SITES:
        valid_keys = ', '.join(sorted(SITES.keys()))
        raise ValueError(f"Unknown site: '{site_key}'. Valid sites: {valid_keys}")
    return SITES[site_key]


def get_enabled_sites() -> dict:
    """Get all enabled sites."""
    return {k: v for k, v in SITES.items() if v.enabled}
