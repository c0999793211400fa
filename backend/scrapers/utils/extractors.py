"""
DOM extraction utilities for scrapers.

These helpers read text and attributes from BeautifulSoup nodes and fall
back to a placeholder string instead of None, so incomplete cards can be
filtered uniformly downstream.
"""

from typing import Iterable, List, Union
from bs4 import BeautifulSoup, Tag

from .normalizers import clean_text


def extract_text(node: Union[BeautifulSoup, Tag], selector: str, placeholder: str) -> str:
    """
    Extract the visible text of the first element matching a CSS selector.

    Args:
        node: Element to search within
        selector: CSS selector
        placeholder: Value returned when the element is missing or empty

    Returns:
        Whitespace-collapsed text or the placeholder
    """
    element = node.select_one(selector)
    if element is None:
        return placeholder
    text = clean_text(element.get_text())
    return text or placeholder


def extract_attribute(
    node: Union[BeautifulSoup, Tag],
    selector: str,
    attributes: Iterable[str],
    placeholder: str
) -> str:
    """
    Extract the first non-empty attribute of the first matching element.

    Lazy-loaded images keep the real URL in data-src while src holds a
    blank pixel, so several attribute names can be tried in order.

    Examples:
        <img src="a.jpg">                    -> a.jpg
        <img src="" data-src="b.jpg">        -> b.jpg
        (no img)                             -> placeholder
    """
    element = node.select_one(selector)
    if element is None:
        return placeholder
    for attribute in attributes:
        value = element.get(attribute)
        if isinstance(value, list):
            value = ' '.join(value)
        if value and value.strip():
            return value.strip()
    return placeholder


def select_items(soup: BeautifulSoup, selector: str) -> List[Tag]:
    """Return every element matching the item selector, in DOM order."""
    return soup.select(selector)
