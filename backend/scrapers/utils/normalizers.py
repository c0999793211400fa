"""
Data normalization utilities for scrapers.

These functions standardize scraped data into consistent formats.
"""

import re
from typing import Optional
from urllib.parse import urljoin


def clean_text(text: str) -> str:
    """
    Collapse runs of whitespace (including non-breaking spaces) into one space.

    Examples:
        "  Funda   iPhone\n 15 " -> "Funda iPhone 15"
        "19,99\xa0€"             -> "19,99 €"
    """
    if not text:
        return ''
    return re.sub(r'\s+', ' ', text.replace('\xa0', ' ')).strip()


def normalize_image_url(src: str, base_url: str) -> str:
    """
    Make an image URL absolute.

    Examples:
        //ae01.alicdn.com/kf/a.jpg           -> https://ae01.alicdn.com/kf/a.jpg
        /images/I/71.jpg (base amazon.es)    -> https://www.amazon.es/images/I/71.jpg
        https://m.media-amazon.com/a.jpg     -> unchanged
        data:image/gif;base64,...            -> unchanged
    """
    if not src:
        return src
    src = src.strip()
    if src.startswith('//'):
        return f"https:{src}"
    if src.startswith(('http://', 'https://', 'data:')):
        return src
    return urljoin(base_url, src)


def parse_price(raw_price: str) -> Optional[float]:
    """
    Parse the numeric amount from a raw price string.

    Currency symbols and codes are ignored; no conversion is done.

    Examples:
        "19,99 €"       -> 19.99
        "1.299,00€"     -> 1299.0
        "US $12.34"     -> 12.34
        "€1,234.50"     -> 1234.5
        "19,"           -> 19.0    (Amazon's whole-part element)
        "1.299"         -> 1299.0  (single separator + 3 digits = thousands)
        "Sin precio"    -> None
    """
    if not raw_price:
        return None

    match = re.search(r'\d[\d.,\s]*', raw_price)
    if not match:
        return None

    number = re.sub(r'\s', '', match.group(0)).rstrip('.,')
    if not number:
        return None

    has_dot = '.' in number
    has_comma = ',' in number

    if has_dot and has_comma:
        # Whichever separator comes last is the decimal mark
        if number.rfind(',') > number.rfind('.'):
            number = number.replace('.', '').replace(',', '.')
        else:
            number = number.replace(',', '')
    elif has_dot or has_comma:
        separator = '.' if has_dot else ','
        parts = number.split(separator)
        if len(parts) > 2 or len(parts[-1]) == 3:
            number = ''.join(parts)
        else:
            number = '.'.join(parts)

    try:
        return float(number)
    except ValueError:
        return None
